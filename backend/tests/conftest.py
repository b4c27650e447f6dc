"""Shared test fixtures and capability fakes for the Nottif test suite."""

from __future__ import annotations

import itertools
from typing import Any, Awaitable, Callable, Dict, List, Tuple

import pytest
from apscheduler.triggers.cron import CronTrigger

from nottif.config import NottifConfig
from nottif.services.config_store import ConfigStore
from nottif.services.notifier import Notifier
from nottif.services.orchestrator import Orchestrator
from nottif.utils.errors import ScheduleError

WEBHOOK_URL = "https://discord.test/api/webhooks/1/abc"


class FakeTransport:
    """Records every POST; answers with ``status`` unless the URL is unreachable."""

    def __init__(self, status: int = 204):
        self.status = status
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.unreachable: set[str] = set()
        self.closed = False

    async def post(self, url: str, body: Dict[str, Any]) -> int:
        self.calls.append((url, body))
        if url in self.unreachable:
            raise ConnectionError(f"cannot connect to {url}")
        return self.status

    async def close(self) -> None:
        self.closed = True

    @property
    def descriptions(self) -> List[str]:
        return [body["embeds"][0]["description"] for _, body in self.calls]


class FakeEngine:
    """Schedule engine without timers: validates like APScheduler, fires on demand."""

    def __init__(self):
        self.jobs: Dict[int, Tuple[str, Callable[[], Awaitable[None]]]] = {}
        self.cancelled: List[int] = []
        self.started = False
        self.stopped = False
        self._ids = itertools.count(1)

    def register(self, expression: str, func: Callable[[], Awaitable[None]]) -> int:
        try:
            CronTrigger.from_crontab(expression)
        except ValueError as e:
            raise ScheduleError(f"invalid cron expression '{expression}': {e}") from e
        handle = next(self._ids)
        self.jobs[handle] = (expression, func)
        return handle

    def cancel(self, handle: int) -> None:
        self.jobs.pop(handle, None)
        self.cancelled.append(handle)

    def start(self) -> None:
        self.started = True

    def shutdown(self) -> None:
        self.stopped = True

    async def fire_all(self) -> None:
        for _, func in list(self.jobs.values()):
            await func()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def notifier(transport) -> Notifier:
    return Notifier(WEBHOOK_URL, transport=transport)


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "data" / "config.json"


@pytest.fixture
def config_store(config_path) -> ConfigStore:
    store = ConfigStore(config_path, NottifConfig(webhook_url=WEBHOOK_URL))
    store.save()
    return store


@pytest.fixture
def orchestrator(config_store, notifier, engine) -> Orchestrator:
    return Orchestrator(config_store, notifier, engine=engine)


def persisted_config(path) -> NottifConfig:
    return NottifConfig.model_validate_json(path.read_text(encoding="utf-8"))
