"""Horizontal and vertical banner settings."""
import logging

from ims.schemas.records import Table
from ims.services.errors import ValidationFailed
from ims.services.session import SessionContext

logger = logging.getLogger(__name__)

BANNER_KEYS = {
    "horizontal": Table.BANNER,
    "vertical": Table.VERTICAL_BANNER,
}


def banner_table(kind: str) -> Table:
    try:
        return BANNER_KEYS[kind]
    except KeyError:
        raise ValidationFailed(f"Unknown banner {kind!r}, expected one of {', '.join(BANNER_KEYS)}")


class BannerService:
    """Banners are singleton settings, visible to everyone, set by the admin."""

    def __init__(self, store, sync):
        self.store = store
        self.sync = sync

    def get_banner(self, kind: str = "horizontal") -> str:
        return self.store.get_setting(banner_table(kind))

    def get_banners(self) -> dict[str, str]:
        return {kind: self.store.get_setting(table) for kind, table in BANNER_KEYS.items()}

    def set_banner(self, ctx: SessionContext, kind: str, url: str) -> str:
        ctx.require_admin()
        table = banner_table(kind)
        value = (url or "").strip()
        self.store.put_setting(table, value)
        self.sync.push_setting(table, value)
        logger.info(f"{kind} banner {'set' if value else 'cleared'}")
        return value
