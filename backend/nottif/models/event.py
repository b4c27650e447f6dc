"""
Notification event model.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class EventSource(str, Enum):
    """What triggered a notification attempt."""
    API = "API"
    CRON = "Cron"
    TEST = "Test"
    SYSTEM = "System"


class Event(BaseModel):
    """One record of a notification attempt. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source: EventSource
    message: str
    success: bool


EventList = TypeAdapter(List[Event])


def serialize_events(events: List[Event]) -> str:
    """JSON array of events, in the order given."""
    return EventList.dump_json(events).decode()
