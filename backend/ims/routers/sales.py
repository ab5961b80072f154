"""Sales router."""
from typing import List

from fastapi import APIRouter, Depends, status

from ims.context import AppContext
from ims.routers.auth import get_context, get_session
from ims.schemas.operations import SaleCreate
from ims.schemas.records import Sale
from ims.services.session import SessionContext

router = APIRouter(prefix="/sales", tags=["sales"])


@router.get("", response_model=List[Sale])
async def get_sales(
    session: SessionContext = Depends(get_session),
    context: AppContext = Depends(get_context),
):
    return context.inventory.get_sales(session)


@router.post("", response_model=Sale, status_code=status.HTTP_201_CREATED)
async def process_sale(
    payload: SaleCreate,
    session: SessionContext = Depends(get_session),
    context: AppContext = Depends(get_context),
):
    """Sell from stock; 409 with ``insufficient_stock`` when stock is short."""
    return context.inventory.process_sale(session, payload.item_name, payload.quantity, payload.price)
