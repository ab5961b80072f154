"""Cache entry model: one row per table key."""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON

from ims.database import Base


class CacheEntry(Base):
    """A serialized table (list of records) or scalar setting, keyed by table key."""

    __tablename__ = "cache_entries"

    key = Column(String(64), primary_key=True)
    value = Column(JSON, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
