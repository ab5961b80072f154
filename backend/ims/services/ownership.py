"""Read-time tenant isolation for owned tables."""
from typing import Any, Iterable

from ims.schemas.records import Table, UserRole


ADMIN_ID = "admin_001"


def is_privileged(tenant: Any) -> bool:
    """True for the administering tenant (reserved id or Admin role)."""
    if not isinstance(tenant, dict):
        return False
    return tenant.get("id") == ADMIN_ID or tenant.get("role") == UserRole.ADMIN.value


def filter_owned(records: Iterable[Any], tenant: dict | None) -> list[dict]:
    """
    Restrict rows to those owned by ``tenant``.

    Default deny: no tenant, the privileged tenant, a tenant without a
    username, and rows without a string ``owner`` all yield nothing.
    Owner matching is exact and case-sensitive.
    """
    if not tenant or not isinstance(tenant, dict) or is_privileged(tenant):
        return []

    username = tenant.get("username")
    if not isinstance(username, str) or not username:
        return []

    return [
        r for r in records
        if isinstance(r, dict)
        and isinstance(r.get("owner"), str)
        and r["owner"] == username
    ]


def owned_records(store, table: Table, tenant: dict | None) -> list[dict]:
    """Read ``table`` from the cache through the ownership filter."""
    if not tenant:
        return []
    return filter_owned(store.get(table), tenant)
