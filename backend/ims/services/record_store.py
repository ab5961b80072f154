"""Local record cache: the single read path for every query.

Each table key maps to one ``cache_entries`` row holding either a JSON array
of records or, for banner settings, a plain string. Reads never fail on a
missing or damaged entry; the default value is synthesized instead.
"""
import copy
import logging
from typing import Any

from sqlalchemy.orm import sessionmaker

from ims.models.cache import CacheEntry
from ims.schemas.records import LIST_TABLES, SETTING_TABLES, Table

logger = logging.getLogger(__name__)


class RecordStore:
    """Key/value store of table key -> ordered list of records."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def _load(self, key: str) -> Any:
        with self._session_factory() as db:
            entry = db.get(CacheEntry, key)
            return None if entry is None else copy.deepcopy(entry.value)

    def _save(self, key: str, value: Any) -> None:
        with self._session_factory() as db:
            entry = db.get(CacheEntry, key)
            if entry is None:
                db.add(CacheEntry(key=key, value=value))
            else:
                entry.value = value
            db.commit()

    def has(self, key: str) -> bool:
        with self._session_factory() as db:
            return db.get(CacheEntry, key) is not None

    # -------------------------
    # Tables
    # -------------------------
    def get(self, table: Table | str) -> list[dict]:
        """Return a copy of the table; an absent or damaged table reads as empty."""
        key = Table(table).value
        value = self._load(key)
        if not isinstance(value, list):
            if value is not None:
                logger.warning(f"Cache entry {key} is not a list, reading as empty")
            return []
        return value

    def put(self, table: Table | str, records: list[dict]) -> None:
        """Replace the table wholesale."""
        key = Table(table).value
        self._save(key, list(records))

    # -------------------------
    # Scalar settings
    # -------------------------
    def get_setting(self, key: Table | str) -> str:
        key = key.value if isinstance(key, Table) else key
        value = self._load(key)
        return value if isinstance(value, str) else ""

    def put_setting(self, key: Table | str, value: str) -> None:
        key = key.value if isinstance(key, Table) else key
        self._save(key, value or "")

    # -------------------------
    # Initialization
    # -------------------------
    def initialize(self) -> list[str]:
        """Create every missing entry with its default. Returns the keys created."""
        created = []
        for table in LIST_TABLES:
            if not self.has(table.value):
                self._save(table.value, [])
                created.append(table.value)
        for table in SETTING_TABLES:
            if not self.has(table.value):
                self._save(table.value, "")
                created.append(table.value)
        if created:
            logger.info(f"Initialized cache entries: {', '.join(created)}")
        return created
