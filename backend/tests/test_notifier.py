"""Tests for webhook delivery."""

from __future__ import annotations

import pytest

from nottif.constants import (
    CRON_USERNAME,
    DEFAULT_AVATAR_URL,
    DEFAULT_USERNAME,
    EMBED_COLOR,
    MAX_CONTENT_LENGTH,
)
from nottif.models.identity import Identity
from nottif.services.notifier import Notifier
from nottif.utils.errors import DeliveryError, MessageTooLargeError
from tests.conftest import WEBHOOK_URL, FakeTransport


class TestPayload:
    async def test_single_part_payload(self, notifier, transport) -> None:
        await notifier.send("hello **world**")

        assert len(transport.calls) == 1
        url, body = transport.calls[0]
        assert url == WEBHOOK_URL
        assert body["username"] == DEFAULT_USERNAME
        assert body["avatar_url"] == DEFAULT_AVATAR_URL
        embed = body["embeds"][0]
        assert embed["description"] == "hello **world**"
        assert embed["color"] == EMBED_COLOR
        assert embed["footer"] == {"text": "via Nottif"}
        assert embed["timestamp"].endswith("+00:00")

    async def test_identity_override(self, notifier, transport) -> None:
        await notifier.send("hi", Identity(username=CRON_USERNAME, avatar_url="https://img.test/a.png"))
        _, body = transport.calls[0]
        assert body["username"] == CRON_USERNAME
        assert body["avatar_url"] == "https://img.test/a.png"


class TestParts:
    async def test_exact_limit_is_one_part(self, notifier, transport) -> None:
        await notifier.send("a" * MAX_CONTENT_LENGTH)
        assert len(transport.calls) == 1

    async def test_one_over_limit_is_two_parts(self, notifier, transport) -> None:
        await notifier.send("a" * MAX_CONTENT_LENGTH + "b")
        assert transport.descriptions == ["a" * MAX_CONTENT_LENGTH, "b"]
        footers = [body["embeds"][0]["footer"]["text"] for _, body in transport.calls]
        assert footers == ["via Nottif • part 1/2", "via Nottif • part 2/2"]

    async def test_five_parts_allowed(self, notifier, transport) -> None:
        await notifier.send("a" * MAX_CONTENT_LENGTH * 5)
        assert len(transport.calls) == 5

    async def test_six_parts_rejected_before_sending(self, notifier, transport) -> None:
        with pytest.raises(MessageTooLargeError):
            await notifier.send("a" * MAX_CONTENT_LENGTH * 5 + "b")
        assert transport.calls == []

    async def test_small_limits(self, transport) -> None:
        notifier = Notifier(WEBHOOK_URL, transport=transport, max_content_length=4, max_parts=2)
        await notifier.send("abcdefgh")
        assert transport.descriptions == ["abcd", "efgh"]
        with pytest.raises(MessageTooLargeError):
            await notifier.send("abcdefghi")


class TestFailures:
    async def test_non_204_is_failure(self) -> None:
        transport = FakeTransport(status=200)
        notifier = Notifier(WEBHOOK_URL, transport=transport)
        with pytest.raises(DeliveryError, match="status 200"):
            await notifier.send("hi")

    async def test_failure_aborts_remaining_parts(self) -> None:
        transport = FakeTransport(status=500)
        notifier = Notifier(WEBHOOK_URL, transport=transport)
        with pytest.raises(DeliveryError):
            await notifier.send("a" * MAX_CONTENT_LENGTH * 3)
        assert len(transport.calls) == 1

    async def test_transport_error_is_delivery_error(self, notifier, transport) -> None:
        transport.unreachable.add(WEBHOOK_URL)
        with pytest.raises(DeliveryError, match="cannot connect"):
            await notifier.send("hi")

    async def test_missing_webhook(self, transport) -> None:
        notifier = Notifier("", transport=transport)
        with pytest.raises(DeliveryError, match="not configured"):
            await notifier.send("hi")
        assert transport.calls == []


class TestWebhookUpdate:
    async def test_in_flight_send_keeps_its_url(self) -> None:
        notifier: Notifier

        class SwitchingTransport(FakeTransport):
            async def post(self, url, body):
                status = await super().post(url, body)
                notifier.set_webhook_url("https://other.test/hook")
                return status

        transport = SwitchingTransport()
        notifier = Notifier(WEBHOOK_URL, transport=transport)
        await notifier.send("a" * MAX_CONTENT_LENGTH * 3)

        assert [url for url, _ in transport.calls] == [WEBHOOK_URL] * 3
        assert notifier.webhook_url == "https://other.test/hook"

    async def test_close_closes_transport(self, notifier, transport) -> None:
        await notifier.close()
        assert transport.closed
