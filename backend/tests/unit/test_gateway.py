"""Tests for the remote sheet gateway."""
import asyncio
import json

import httpx
import pytest

from ims.services.gateway import (
    Malformed,
    NotConfigured,
    RemoteError,
    RemoteGateway,
    Unreachable,
)

URL = "https://script.example.com/macros/s/test/exec"


def gateway_for(handler, url: str = URL) -> RemoteGateway:
    return RemoteGateway(url, timeout=5, transport=httpx.MockTransport(handler))


def pull(gateway: RemoteGateway):
    return asyncio.run(gateway.pull_snapshot())


class TestPullSnapshot:
    """Test GET decoding and the error taxonomy."""

    def test_success_decodes_tables_and_settings(self):
        """Arrays and scalar banner values come back as sent."""
        def handler(request):
            assert request.method == "GET"
            return httpx.Response(200, json={
                "result": "success",
                "data": {
                    "ims_users": [{"id": "user_1", "username": "Acme"}],
                    "ims_inventory": [],
                    "ims_banner": "https://img.example/b.png",
                },
            })

        snapshot = pull(gateway_for(handler))

        assert snapshot.get("ims_users") == [{"id": "user_1", "username": "Acme"}]
        assert snapshot.get("ims_inventory") == []
        assert snapshot.get("ims_banner") == "https://img.example/b.png"
        assert snapshot.get("ims_sales") is None
        assert snapshot.fetched_at is not None

    def test_follows_apps_script_redirect(self):
        """Apps Script answers with a 302 to the rendered output."""
        def handler(request):
            if request.url.host == "script.example.com":
                return httpx.Response(302, headers={"Location": "https://echo.example.com/out"})
            return httpx.Response(200, json={"result": "success", "data": {"ims_sales": []}})

        snapshot = pull(gateway_for(handler))

        assert snapshot.data == {"ims_sales": []}

    def test_empty_endpoint_fails_fast(self):
        """No request is made without an endpoint."""
        def handler(request):
            raise AssertionError("no request expected")

        with pytest.raises(NotConfigured):
            pull(gateway_for(handler, url="   "))

    def test_transport_failure_is_unreachable(self):
        """Connection errors map to Unreachable."""
        def handler(request):
            raise httpx.ConnectError("connection refused")

        with pytest.raises(Unreachable):
            pull(gateway_for(handler))

    def test_http_error_status_is_unreachable(self):
        """A non-2xx status maps to Unreachable."""
        with pytest.raises(Unreachable):
            pull(gateway_for(lambda request: httpx.Response(503, text="unavailable")))

    @pytest.mark.parametrize("body", [
        b"<html>Sign in</html>",
        b"[1, 2, 3]",
        b'{"data": {}}',
        b'{"result": "ok", "data": {}}',
        b'{"result": "success", "data": []}',
        b'{"result": "success"}',
    ])
    def test_non_conforming_body_is_malformed(self, body):
        """Anything but the success/error envelope is Malformed."""
        with pytest.raises(Malformed):
            pull(gateway_for(lambda request: httpx.Response(200, content=body)))

    def test_remote_reported_failure(self):
        """result == error carries the remote message."""
        def handler(request):
            return httpx.Response(200, json={"result": "error", "error": "Exception: sheet locked"})

        with pytest.raises(RemoteError) as exc_info:
            pull(gateway_for(handler))

        assert exc_info.value.message == "Exception: sheet locked"


class TestSend:
    """Test POST payloads."""

    def test_send_record_payload(self):
        """save_record carries one record under its table key."""
        seen = []

        def handler(request):
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"result": "success"})

        gateway_for(handler).send_record("ims_sales", {"id": "sale_1", "owner": "Acme"})

        assert seen == [{"action": "save_record", "key": "ims_sales", "data": {"id": "sale_1", "owner": "Acme"}}]

    def test_send_table_payload(self):
        """bulk_save carries the whole table."""
        seen = []

        def handler(request):
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"result": "success"})

        gateway_for(handler).send_table("ims_users", [{"id": "a"}, {"id": "b"}])

        assert seen[0]["action"] == "bulk_save"
        assert seen[0]["data"] == [{"id": "a"}, {"id": "b"}]

    def test_send_without_endpoint_is_noop(self):
        """Pushing with no endpoint silently does nothing."""
        def handler(request):
            raise AssertionError("no request expected")

        gateway = gateway_for(handler, url="")
        gateway.send_record("ims_sales", {"id": "sale_1"})
        gateway.send_table("ims_sales", [])

        assert gateway.configured is False

    def test_send_remote_error(self):
        """The remote's own error reply is raised to the dispatcher."""
        def handler(request):
            return httpx.Response(200, json={"result": "error", "error": "bad key"})

        with pytest.raises(RemoteError):
            gateway_for(handler).send_record("ims_sales", {"id": "sale_1"})

    def test_send_transport_failure(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out")

        with pytest.raises(Unreachable):
            gateway_for(handler).send_table("ims_sales", [])
