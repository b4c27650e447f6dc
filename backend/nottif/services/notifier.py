"""
Notifier: delivers messages to the configured Discord-compatible webhook.
"""
import asyncio
import aiohttp
from typing import Dict, Any, Optional, List, Protocol
from datetime import datetime, timezone
from loguru import logger

from nottif.constants import (
    DEFAULT_AVATAR_URL,
    DEFAULT_USERNAME,
    EMBED_COLOR,
    FOOTER_TEXT,
    MAX_CONTENT_LENGTH,
    MAX_MESSAGE_PARTS,
    WEBHOOK_SUCCESS_STATUS,
    WEBHOOK_TIMEOUT_SECONDS,
)
from nottif.models.identity import Identity
from nottif.utils.errors import DeliveryError, MessageTooLargeError
from nottif.utils.formatting import split_message


class Transport(Protocol):
    """Outbound HTTP capability. Returns the response status; raises on transport failure."""

    async def post(self, url: str, body: Dict[str, Any]) -> int:
        ...

    async def close(self) -> None:
        ...


class AiohttpTransport:
    """Transport backed by a shared aiohttp session."""

    def __init__(self, timeout: float = WEBHOOK_TIMEOUT_SECONDS):
        self._timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout)
            )
        return self._session

    async def post(self, url: str, body: Dict[str, Any]) -> int:
        async with self.session.post(url, json=body) as response:
            if response.status != WEBHOOK_SUCCESS_STATUS:
                text = await response.text()
                logger.debug(f"Webhook responded {response.status}: {text[:200]}")
            return response.status

    async def close(self):
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()


class Notifier:
    """
    Sends one message per call, split into ordered parts when it is long.

    No retries: a failed delivery is reported to the caller, which decides
    what to do with it.
    """

    def __init__(
        self,
        webhook_url: str = "",
        transport: Optional[Transport] = None,
        max_content_length: int = MAX_CONTENT_LENGTH,
        max_parts: int = MAX_MESSAGE_PARTS,
    ):
        self._webhook_url = webhook_url
        self.transport: Transport = transport or AiohttpTransport()
        self.max_content_length = max_content_length
        self.max_parts = max_parts

    @property
    def webhook_url(self) -> str:
        return self._webhook_url

    def set_webhook_url(self, url: str):
        """Point future sends at a new webhook. Sends already running keep their URL."""
        self._webhook_url = url

    def split(self, message: str) -> List[str]:
        """
        Split a message into deliverable parts.

        Raises:
            MessageTooLargeError: if more than max_parts parts are needed
        """
        parts = split_message(message, self.max_content_length)
        if len(parts) > self.max_parts:
            raise MessageTooLargeError(
                f"message of {len(message)} characters needs {len(parts)} parts "
                f"(limit {self.max_parts} x {self.max_content_length})"
            )
        return parts

    def build_payload(
        self,
        content: str,
        identity: Optional[Identity] = None,
        part: int = 1,
        total: int = 1,
    ) -> Dict[str, Any]:
        """Render the webhook JSON body for one part."""
        identity = identity or Identity()
        footer = FOOTER_TEXT if total == 1 else f"{FOOTER_TEXT} • part {part}/{total}"
        return {
            "username": identity.username or DEFAULT_USERNAME,
            "avatar_url": identity.avatar_url or DEFAULT_AVATAR_URL,
            "embeds": [
                {
                    "description": content,
                    "color": EMBED_COLOR,
                    "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
                    "footer": {"text": footer},
                }
            ],
        }

    async def send(self, message: str, identity: Optional[Identity] = None) -> None:
        """
        Deliver a message, one POST per part, stopping at the first failure.

        Raises:
            MessageTooLargeError: message needs too many parts; nothing is sent
            DeliveryError: no webhook configured, non-204 response or transport error
        """
        # Snapshot so a concurrent webhook update cannot split one message across targets
        url = self._webhook_url
        if not url:
            raise DeliveryError("webhook URL is not configured")

        parts = self.split(message)
        total = len(parts)

        for index, content in enumerate(parts, start=1):
            payload = self.build_payload(content, identity, index, total)
            try:
                status = await self.transport.post(url, payload)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                raise DeliveryError(f"webhook request failed (part {index}/{total}): {e}") from e

            if status != WEBHOOK_SUCCESS_STATUS:
                raise DeliveryError(f"webhook failed with status {status} (part {index}/{total})")

        logger.debug(f"Delivered message in {total} part(s)")

    async def close(self):
        await self.transport.close()
