"""Sync and banner schemas."""
from datetime import datetime

from ims.schemas.records import ApiModel


class SyncStatus(ApiModel):
    """State of the sync engine."""
    state: str
    configured: bool
    dispatcher: str
    last_synced_at: datetime | None = None
    last_error: str | None = None
    tables_applied: list[str] = []
    tables_kept: list[str] = []
    pushes_dispatched: int = 0
    pushes_failed: int = 0
    last_push_error: str | None = None


class EndpointUpdate(ApiModel):
    """Remote web app URL; an empty string disables sync."""
    url: str = ""


class PublishResult(ApiModel):
    published: list[str]


class BannerUpdate(ApiModel):
    url: str = ""


class Banners(ApiModel):
    horizontal: str = ""
    vertical: str = ""
