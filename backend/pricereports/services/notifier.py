"""Notifier - best-effort webhook messages for new contributors and critical errors"""
import logging
from typing import Optional

import httpx

from pricereports.core.config import settings

logger = logging.getLogger(__name__)


class LocationLookupError(Exception):
    pass


class Notifier:
    """
    Posts Discord-style ``{"content": ...}`` messages to a webhook.

    Nothing here is on the request's critical path: every public coroutine
    logs its own failures and returns normally. Without a webhook URL the
    message is only logged.
    """

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        geolookup_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.webhook_url = webhook_url if webhook_url is not None else settings.NOTIFY_WEBHOOK_URL
        self.geolookup_url = geolookup_url if geolookup_url is not None else settings.GEOLOOKUP_URL
        self.timeout = timeout if timeout is not None else settings.OUTBOUND_TIMEOUT_SECONDS
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def resolve_location(self, address: str) -> str:
        """Coarse "city, region, country" for an address (ip-api JSON shape)."""
        if not address:
            raise LocationLookupError("no client address")

        async with self._client() as client:
            response = await client.get(self.geolookup_url.format(address=address))
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise LocationLookupError("unexpected lookup response")

        if payload.get("status") == "fail":
            raise LocationLookupError(payload.get("message", "lookup failed"))
        parts = [payload.get(key) for key in ("city", "regionName", "country")]
        location = ", ".join(str(part) for part in parts if part)
        if not location:
            raise LocationLookupError("empty location")
        return location

    async def send(self, content: str) -> None:
        if not self.webhook_url:
            logger.info("Notification (no webhook configured): %s", content)
            return
        async with self._client() as client:
            response = await client.post(self.webhook_url, json={"content": content})
        response.raise_for_status()

    async def notify_new_contributor(self, address: str, report_count: int) -> None:
        try:
            location = await self.resolve_location(address)
        except Exception as exc:
            # Any enrichment failure degrades to the count-only message
            logger.warning("Location lookup failed: %s", exc)
            content = f"New contributor submitted {report_count} reports"
        else:
            content = f"New contributor submitted {report_count} reports from {location}"

        try:
            await self.send(content)
        except httpx.HTTPError as exc:
            logger.warning("New contributor notification failed: %s", exc)

    async def report_critical(self, message: str) -> None:
        try:
            await self.send(f"```{message}```")
        except httpx.HTTPError as exc:
            logger.warning("Critical error report failed: %s", exc)
