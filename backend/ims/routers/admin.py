"""Admin router for tenant approval and password management."""
from typing import List

from fastapi import APIRouter, Depends

from ims.context import AppContext
from ims.routers.auth import get_context, require_admin
from ims.schemas.user import PasswordReset, StatusUpdate, UserRead
from ims.services.session import SessionContext

router = APIRouter(prefix="/admin", tags=["admin"])


# ============ Tenant Management ============

@router.get("/users", response_model=List[UserRead])
async def list_users(
    session: SessionContext = Depends(require_admin),
    context: AppContext = Depends(get_context),
):
    """List every registered tenant, including the administrator."""
    return context.accounts.get_users(session)


@router.patch("/users/{user_id}/status")
async def update_user_status(
    user_id: str,
    update: StatusUpdate,
    session: SessionContext = Depends(require_admin),
    context: AppContext = Depends(get_context),
):
    """Approve, reject or delete a tenant."""
    user = context.accounts.update_user_status(session, user_id, update.status)
    if user is None:
        return {"success": True, "message": "User deleted"}
    return {"success": True, "user": UserRead.model_validate(user).model_dump(by_alias=True, mode="json")}


@router.post("/users/{user_id}/password", response_model=UserRead)
async def reset_password(
    user_id: str,
    payload: PasswordReset,
    session: SessionContext = Depends(require_admin),
    context: AppContext = Depends(get_context),
):
    """Set a new password for a tenant."""
    return context.accounts.reset_password(session, user_id, payload.password)
