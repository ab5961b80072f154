"""Remote gateway for the sheet-backed store.

The remote side is an Apps Script web app behind a single URL:

* ``GET``  returns ``{"result": "success", "data": {<key>: [...] | "..."}}``
  or ``{"result": "error", "error": "..."}``
* ``POST`` accepts ``{"action": "save_record" | "bulk_save", "key", "data"}``

Apps Script answers both verbs with a 302 to the rendered output, so
redirects are always followed.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Base class for remote store failures."""


class NotConfigured(GatewayError):
    """No endpoint URL is set."""


class Unreachable(GatewayError):
    """Transport failure, timeout or non-2xx HTTP status."""


class Malformed(GatewayError):
    """The response does not match the expected envelope."""


class RemoteError(GatewayError):
    """The remote store reported a failure itself."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


@dataclass
class Snapshot:
    """Full export of every table, as returned by a pull."""
    data: dict[str, Any]
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def get(self, key: str) -> Any:
        return self.data.get(key)


class RemoteGateway:
    """Stateless HTTP adapter: one instance per endpoint URL."""

    def __init__(
        self,
        endpoint: str,
        timeout: float = 30.0,
        transport: httpx.MockTransport | None = None,
    ):
        self.endpoint = (endpoint or "").strip()
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.endpoint)

    def _decode(self, response: httpx.Response) -> dict:
        """Validate the ``result`` envelope and return the parsed body."""
        try:
            payload = response.json()
        except ValueError as e:
            raise Malformed(f"Response is not JSON: {e}") from e

        if not isinstance(payload, dict):
            raise Malformed("Response body is not an object")

        result = payload.get("result")
        if result == "error":
            raise RemoteError(str(payload.get("error") or "unknown remote error"))
        if result != "success":
            raise Malformed(f"Unexpected result discriminant: {result!r}")
        return payload

    async def pull_snapshot(self) -> Snapshot:
        """Fetch every table from the remote store."""
        if not self.configured:
            raise NotConfigured("No sync endpoint configured")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(self.endpoint)
        except httpx.HTTPError as e:
            raise Unreachable(f"GET failed: {e}") from e

        if not response.is_success:
            raise Unreachable(f"Remote returned {response.status_code}")

        payload = self._decode(response)
        data = payload.get("data")
        if not isinstance(data, dict):
            raise Malformed("Snapshot 'data' is not an object")

        logger.info(f"Pulled snapshot with keys: {', '.join(sorted(data)) or '(none)'}")
        return Snapshot(data=data)

    def _post(self, payload: dict) -> None:
        if not self.configured:
            logger.debug(f"Skipping {payload['action']} for {payload['key']}: no endpoint")
            return

        try:
            with httpx.Client(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = client.post(self.endpoint, json=payload)
        except httpx.HTTPError as e:
            raise Unreachable(f"POST failed: {e}") from e

        if not response.is_success:
            raise Unreachable(f"Remote returned {response.status_code}")

        self._decode(response)

    def send_record(self, key: str, record: dict) -> None:
        """Upsert one record, keyed remotely by its ``id``."""
        self._post({"action": "save_record", "key": key, "data": record})

    def send_table(self, key: str, records: list[dict]) -> None:
        """Replace a whole remote sheet."""
        self._post({"action": "bulk_save", "key": key, "data": records})
