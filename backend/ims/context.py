"""Wires the record store, sync engine and domain services together."""
from dataclasses import dataclass
from typing import Callable

from sqlalchemy.orm import sessionmaker

from ims.config import Settings
from ims.services.accounts import AccountService
from ims.services.banners import BannerService
from ims.services.gateway import RemoteGateway
from ims.services.inventory import InventoryService
from ims.services.ledger import LedgerService
from ims.services.record_store import RecordStore
from ims.services.sync import SyncEngine


@dataclass
class AppContext:
    """Everything a request handler needs, built once per process."""
    settings: Settings
    store: RecordStore
    sync: SyncEngine
    accounts: AccountService
    inventory: InventoryService
    ledger: LedgerService
    banners: BannerService


def build_context(
    settings: Settings,
    session_factory: sessionmaker,
    gateway_factory: Callable[[str], RemoteGateway] | None = None,
) -> AppContext:
    store = RecordStore(session_factory)
    sync = SyncEngine(store, settings, gateway_factory=gateway_factory)
    return AppContext(
        settings=settings,
        store=store,
        sync=sync,
        accounts=AccountService(store, sync),
        inventory=InventoryService(store, sync),
        ledger=LedgerService(store, sync),
        banners=BannerService(store, sync),
    )
