"""Sync router: status, endpoint configuration and manual pull/publish."""
from fastapi import APIRouter, Depends

from ims.context import AppContext
from ims.routers.auth import get_context, require_admin
from ims.schemas.sync import EndpointUpdate, PublishResult, SyncStatus
from ims.services.session import SessionContext

router = APIRouter(prefix="/sync", tags=["sync"])


@router.get("/status", response_model=SyncStatus)
async def get_status(
    session: SessionContext = Depends(require_admin),
    context: AppContext = Depends(get_context),
):
    return context.sync.status()


@router.put("/endpoint", response_model=SyncStatus)
async def set_endpoint(
    payload: EndpointUpdate,
    session: SessionContext = Depends(require_admin),
    context: AppContext = Depends(get_context),
):
    """Store the remote web app URL. Takes effect for the next push or pull."""
    context.sync.set_endpoint(payload.url)
    return context.sync.status()


@router.post("/pull", response_model=SyncStatus)
async def pull(
    session: SessionContext = Depends(require_admin),
    context: AppContext = Depends(get_context),
):
    """Run a reconciliation now. Failures show up in the status, not as errors."""
    await context.sync.reconcile()
    return context.sync.status()


@router.post("/publish", response_model=PublishResult)
async def publish(
    session: SessionContext = Depends(require_admin),
    context: AppContext = Depends(get_context),
):
    """Upload every local table to the remote store (first-time provisioning)."""
    return {"published": context.sync.publish_all()}
