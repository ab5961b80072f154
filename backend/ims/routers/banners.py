"""Banner router. Reading is public; only the admin sets banners."""
from fastapi import APIRouter, Depends

from ims.context import AppContext
from ims.routers.auth import get_context, require_admin
from ims.schemas.sync import BannerUpdate, Banners
from ims.services.session import SessionContext

router = APIRouter(prefix="/banners", tags=["banners"])


@router.get("", response_model=Banners)
async def get_banners(context: AppContext = Depends(get_context)):
    return context.banners.get_banners()


@router.put("/{kind}", response_model=Banners)
async def set_banner(
    kind: str,
    payload: BannerUpdate,
    session: SessionContext = Depends(require_admin),
    context: AppContext = Depends(get_context),
):
    """Set the ``horizontal`` or ``vertical`` banner URL."""
    context.banners.set_banner(session, kind, payload.url)
    return context.banners.get_banners()
