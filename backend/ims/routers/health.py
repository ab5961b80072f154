"""Health check router."""
from fastapi import APIRouter, Depends

from ims.context import AppContext
from ims.routers.auth import get_context
from ims.schemas.records import Table

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness_check(context: AppContext = Depends(get_context)):
    """Readiness: the cache answers. Sync state is informational only."""
    context.store.get(Table.USERS)
    return {
        "status": "ready",
        "checks": {"cache": "ok", "sync": context.sync.state.value},
    }
