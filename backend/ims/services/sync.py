"""
Sync engine: keeps the local cache and the remote sheet store in step.

Two flows:

1. Startup reconciliation. One pull of the remote snapshot, merged into the
   cache table by table. A remote list table replaces the local one only when
   it is non-empty and every row validates; an empty or missing remote table
   means "not provisioned yet" and never erases local data. A non-empty
   remote banner value always wins.
2. Write propagation. After a domain operation commits to the cache, the
   touched record is handed to a dispatcher and the caller moves on. Delivery
   is at-most-once and unordered: a failed push is logged, counted and
   dropped, never retried and never allowed to undo the local write.

Sync is optional. Reads and writes work in every state.
"""
import asyncio
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime
from enum import Enum
from typing import Any, Callable

from pydantic import ValidationError

from ims.config import Settings
from ims.schemas.records import (
    LIST_TABLES,
    RECORD_SCHEMAS,
    SETTING_TABLES,
    SYNC_URL_KEY,
    SettingRecord,
    Table,
)
from ims.services.accounts import reseed_admin
from ims.services.gateway import GatewayError, RemoteGateway, Snapshot
from ims.services.record_store import RecordStore

logger = logging.getLogger(__name__)

SAVE_RECORD = "save_record"
BULK_SAVE = "bulk_save"


class SyncState(str, Enum):
    """Sync lifecycle per process."""
    UNINITIALIZED = "uninitialized"
    LOCAL_READY = "local_ready"
    SYNC_PENDING = "sync_pending"
    SYNC_APPLIED = "sync_applied"
    SYNC_FAILED = "sync_failed"


def deliver(gateway: RemoteGateway, action: str, key: str, data: Any) -> None:
    """Send one push through the gateway."""
    if action == BULK_SAVE:
        gateway.send_table(key, data)
    else:
        gateway.send_record(key, data)


class ThreadDispatcher:
    """Runs pushes on a small thread pool; nobody waits on the result."""

    def __init__(
        self,
        gateway_factory: Callable[[str], RemoteGateway],
        on_failure: Callable[[str, str, Exception], None],
        max_workers: int = 4,
    ):
        self._gateway_factory = gateway_factory
        self._on_failure = on_failure
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="ims-push")
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    def _run(self, action: str, endpoint: str, key: str, data: Any) -> None:
        try:
            deliver(self._gateway_factory(endpoint), action, key, data)
        except Exception as e:
            self._on_failure(action, key, e)

    def dispatch(self, action: str, endpoint: str, key: str, data: Any) -> None:
        future = self._executor.submit(self._run, action, endpoint, key, data)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def flush(self, timeout: float | None = None) -> bool:
        """Wait for in-flight pushes. Returns False if some are still running."""
        with self._lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, timeout: float | None = None) -> None:
        if not self.flush(timeout):
            logger.warning("Dropping pushes still in flight at shutdown")
        self._executor.shutdown(wait=False, cancel_futures=True)


class CeleryDispatcher:
    """Hands pushes to a Celery worker. Publishing never retries."""

    def dispatch(self, action: str, endpoint: str, key: str, data: Any) -> None:
        from ims.workers.tasks import push_to_remote

        push_to_remote.apply_async(args=(action, endpoint, key, data), retry=False)

    def flush(self, timeout: float | None = None) -> bool:
        return True

    def shutdown(self, timeout: float | None = None) -> None:
        pass


class SyncEngine:
    """Startup reconciliation plus fire-and-forget write propagation."""

    def __init__(
        self,
        store: RecordStore,
        settings: Settings,
        gateway_factory: Callable[[str], RemoteGateway] | None = None,
    ):
        self.store = store
        self.settings = settings
        self._gateway_factory = gateway_factory or (
            lambda url: RemoteGateway(url, timeout=settings.sync_timeout_seconds)
        )
        if settings.sync_dispatcher == "celery":
            self._dispatcher = CeleryDispatcher()
        else:
            self._dispatcher = ThreadDispatcher(
                self._gateway_factory,
                self._record_push_failure,
                max_workers=settings.sync_push_workers,
            )

        self.state = SyncState.UNINITIALIZED
        self.last_synced_at: datetime | None = None
        self.last_error: str | None = None
        self.tables_applied: list[str] = []
        self.tables_kept: list[str] = []

        self._counter_lock = threading.Lock()
        self.pushes_dispatched = 0
        self.pushes_failed = 0
        self.last_push_error: str | None = None

        self._reconcile_task: asyncio.Task | None = None
        # Tables written locally while a pull is in flight
        self._written_during_pull: set[str] = set()

    # -------------------------
    # Endpoint
    # -------------------------
    @property
    def endpoint(self) -> str:
        """Operator-set URL from the cache, else the configured default."""
        return (self.store.get_setting(SYNC_URL_KEY) or self.settings.sync_endpoint_url or "").strip()

    @property
    def configured(self) -> bool:
        return bool(self.endpoint)

    def set_endpoint(self, url: str) -> None:
        self.store.put_setting(SYNC_URL_KEY, (url or "").strip())
        logger.info("Sync endpoint updated" if url else "Sync endpoint cleared")

    def gateway(self) -> RemoteGateway:
        return self._gateway_factory(self.endpoint)

    # -------------------------
    # Startup
    # -------------------------
    def initialize(self) -> None:
        """Prepare the cache and re-assert the privileged tenant."""
        self.store.initialize()
        reseed_admin(self.store, self.settings)
        self.state = SyncState.LOCAL_READY
        logger.info("Local cache ready")

    def start(self) -> asyncio.Task | None:
        """Schedule the single startup pull. Must run inside an event loop."""
        if self.state is SyncState.UNINITIALIZED:
            self.initialize()
        if not self.configured:
            logger.info("No sync endpoint configured, running on the local cache only")
            return None
        if self._reconcile_task is None:
            self._reconcile_task = asyncio.create_task(self.reconcile())
        return self._reconcile_task

    async def reconcile(self) -> bool:
        """Pull the remote snapshot and merge it. Failures are logged, never raised."""
        gateway = self.gateway()
        if not gateway.configured:
            logger.info("Skipping pull: no sync endpoint configured")
            return False

        self.state = SyncState.SYNC_PENDING
        self._written_during_pull.clear()
        try:
            snapshot = await gateway.pull_snapshot()
        except GatewayError as e:
            self.state = SyncState.SYNC_FAILED
            self.last_error = f"{type(e).__name__}: {e}"
            logger.error(f"Remote pull failed, keeping local cache: {self.last_error}")
            return False

        self.apply_snapshot(snapshot)
        self._written_during_pull.clear()
        self.state = SyncState.SYNC_APPLIED
        self.last_synced_at = snapshot.fetched_at
        self.last_error = None
        return True

    def _remote_rows(self, table: Table, remote: Any) -> list[dict] | None:
        """Validated rows for ``table``, or None when local must be kept."""
        if not isinstance(remote, list) or not remote:
            logger.info(f"Remote {table.value} is empty or missing, keeping local")
            return None
        if not all(isinstance(row, dict) for row in remote):
            logger.warning(f"Remote {table.value} holds non-object rows, keeping local")
            return None

        schema = RECORD_SCHEMAS[table]
        try:
            return [schema.model_validate(row).to_wire() for row in remote]
        except ValidationError as e:
            logger.warning(f"Remote {table.value} failed validation ({e.error_count()} errors), keeping local")
            return None

    def apply_snapshot(self, snapshot: Snapshot) -> tuple[list[str], list[str]]:
        """
        Merge a snapshot into the cache. Returns (applied keys, kept keys).

        A table written locally since the pull started is kept: the snapshot
        predates that write and applying it would undo it.
        """
        applied, kept = [], []
        written = set(self._written_during_pull)

        for table in LIST_TABLES:
            if table.value in written:
                logger.info(f"{table.value} changed locally during the pull, keeping local")
                kept.append(table.value)
                continue
            rows = self._remote_rows(table, snapshot.get(table.value))
            if rows is None:
                kept.append(table.value)
                continue
            self.store.put(table, rows)
            applied.append(table.value)
            if table is Table.USERS:
                reseed_admin(self.store, self.settings)

        for table in SETTING_TABLES:
            value = snapshot.get(table.value)
            if table.value in written:
                kept.append(table.value)
            elif isinstance(value, str) and value:
                self.store.put_setting(table, value)
                applied.append(table.value)
            else:
                kept.append(table.value)

        self.tables_applied, self.tables_kept = applied, kept
        logger.info(
            f"Snapshot merged: applied [{', '.join(applied)}], kept local [{', '.join(kept)}]"
        )
        return applied, kept

    # -------------------------
    # Write propagation
    # -------------------------
    def _record_push_failure(self, action: str, key: str, error: Exception) -> None:
        with self._counter_lock:
            self.pushes_failed += 1
            self.last_push_error = f"{type(error).__name__}: {error}"
        logger.warning(f"Dropped {action} push for {key}: {error}")

    def _push(self, action: str, key: str, data: Any) -> None:
        if self.state is SyncState.SYNC_PENDING:
            self._written_during_pull.add(key)
        endpoint = self.endpoint
        if not endpoint:
            logger.debug(f"Sync not configured, {action} for {key} stays local")
            return
        try:
            self._dispatcher.dispatch(action, endpoint, key, data)
        except Exception as e:
            self._record_push_failure(action, key, e)
            return
        with self._counter_lock:
            self.pushes_dispatched += 1

    def push_record(self, table: Table, record: dict) -> None:
        """Best-effort upsert of one record; returns immediately."""
        self._push(SAVE_RECORD, Table(table).value, record)

    def push_setting(self, table: Table, value: str) -> None:
        self.push_record(table, SettingRecord(key=Table(table).value, value=value).model_dump())

    def push_table(self, table: Table) -> None:
        """Best-effort replacement of a whole remote sheet with the local table."""
        table = Table(table)
        self._push(BULK_SAVE, table.value, self.store.get(table))

    def publish_all(self) -> list[str]:
        """Upload every local table, for provisioning a fresh remote sheet."""
        published = []
        for table in LIST_TABLES:
            self.push_table(table)
            published.append(table.value)
        for table in SETTING_TABLES:
            value = self.store.get_setting(table)
            if value:
                self.push_setting(table, value)
                published.append(table.value)
        logger.info(f"Publishing {len(published)} tables to the remote store")
        return published

    # -------------------------
    # Lifecycle
    # -------------------------
    def flush(self, timeout: float | None = None) -> bool:
        return self._dispatcher.flush(timeout)

    def shutdown(self) -> None:
        if self._reconcile_task is not None and not self._reconcile_task.done():
            self._reconcile_task.cancel()
        self._dispatcher.shutdown(self.settings.sync_flush_timeout_seconds)

    def status(self) -> dict:
        with self._counter_lock:
            dispatched, failed, push_error = self.pushes_dispatched, self.pushes_failed, self.last_push_error
        return {
            "state": self.state.value,
            "configured": self.configured,
            "dispatcher": self.settings.sync_dispatcher,
            "last_synced_at": self.last_synced_at,
            "last_error": self.last_error,
            "tables_applied": list(self.tables_applied),
            "tables_kept": list(self.tables_kept),
            "pushes_dispatched": dispatched,
            "pushes_failed": failed,
            "last_push_error": push_error,
        }
