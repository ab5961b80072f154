"""Explicit per-request session context (the active tenant)."""
from dataclasses import dataclass

from ims.services.errors import NotAuthenticated, PermissionDenied
from ims.services.ownership import is_privileged


@dataclass
class SessionContext:
    """Who is acting. ``user`` is the tenant record as stored in the cache."""
    user: dict | None = None

    @property
    def is_admin(self) -> bool:
        return is_privileged(self.user)

    def require_user(self) -> dict:
        if not self.user:
            raise NotAuthenticated()
        return self.user

    def require_tenant(self) -> dict:
        """An ordinary tenant; the privileged tenant owns no records."""
        user = self.require_user()
        if is_privileged(user):
            raise PermissionDenied("The administrator account cannot own business records")
        return user

    def require_admin(self) -> dict:
        user = self.require_user()
        if not is_privileged(user):
            raise PermissionDenied()
        return user
