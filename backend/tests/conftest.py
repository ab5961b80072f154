"""Pytest configuration and fixtures."""
import json
import threading
from typing import Callable

import httpx
import pytest

from ims.config import Settings
from ims.context import build_context
from ims.database import init_db, make_engine, make_session_factory
from ims.services.gateway import RemoteGateway
from ims.services.ownership import ADMIN_ID
from ims.services.record_store import RecordStore
from ims.services.session import SessionContext
from ims.services.sync import SyncEngine

SHEET_URL = "https://script.example.com/macros/s/test/exec"


class FakeSheet:
    """In-memory stand-in for the Apps Script web app."""

    def __init__(self, url: str = SHEET_URL):
        self.url = url
        self.snapshot: dict = {}
        self.get_error: Exception | None = None
        self.get_response: httpx.Response | None = None
        self.fail_posts = False
        self.posts: list[dict] = []
        self.gets = 0
        # Called while a GET is being served, before the snapshot is returned
        self.on_get: Callable[[], None] | None = None
        self._lock = threading.Lock()

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            self.gets += 1
            if self.on_get is not None:
                self.on_get()
            if self.get_error is not None:
                raise self.get_error
            if self.get_response is not None:
                return self.get_response
            return httpx.Response(200, json={"result": "success", "data": self.snapshot})

        body = json.loads(request.content)
        with self._lock:
            self.posts.append(body)
        if self.fail_posts:
            return httpx.Response(500, text="Internal error")
        return httpx.Response(200, json={"result": "success"})

    def gateway_factory(self, url: str) -> RemoteGateway:
        return RemoteGateway(url, timeout=5, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def settings():
    """Test settings."""
    return Settings(
        database_url="sqlite://",
        sync_endpoint_url="",
        secret_key="test-secret-key",
        admin_username="admin",
        admin_password="admin123",
        sync_push_workers=2,
        debug=True,
    )


@pytest.fixture
def session_factory(settings):
    """A fresh in-memory cache database per test."""
    engine = make_engine(settings.database_url)
    init_db(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def store(session_factory):
    store = RecordStore(session_factory)
    store.initialize()
    return store


@pytest.fixture
def sheet():
    return FakeSheet()


@pytest.fixture
def sync_engine(store, settings, sheet):
    engine = SyncEngine(store, settings, gateway_factory=sheet.gateway_factory)
    engine.initialize()
    yield engine
    engine.shutdown()


@pytest.fixture
def context(settings, session_factory, sheet):
    """All services over one in-memory cache, sync not configured."""
    ctx = build_context(settings, session_factory, sheet.gateway_factory)
    ctx.sync.initialize()
    yield ctx
    ctx.sync.shutdown()


@pytest.fixture
def admin(context):
    """Session of the privileged tenant."""
    return SessionContext(user=context.accounts.get_user(ADMIN_ID))


def make_tenant(context, username: str, company: str | None = None) -> SessionContext:
    """Register and approve a tenant, returning its session."""
    user = context.accounts.register(company or f"{username} Ltd", username, "secret")
    admin = SessionContext(user=context.accounts.get_user(ADMIN_ID))
    context.accounts.update_user_status(admin, user["id"], "Approved")
    return SessionContext(user=context.accounts.get_user(user["id"]))


@pytest.fixture
def acme(context):
    return make_tenant(context, "Acme")


@pytest.fixture
def globex(context):
    return make_tenant(context, "Globex")
