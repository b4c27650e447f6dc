"""
Bounded, newest-first log of notification attempts.
"""
import asyncio
from collections import deque
from typing import Callable, Deque, List, Optional

from nottif.constants import DISPLAY_MESSAGE_LENGTH, MAX_EVENTS
from nottif.models.event import Event, EventSource, serialize_events
from nottif.utils.formatting import truncate_display


class EventLog:
    """
    Keeps the most recent ``capacity`` events, newest first.

    ``record`` is serialized by a lock and hands the serialized log to
    ``publish`` while still holding it, so observers receive snapshots in the
    same order the log changed.
    """

    def __init__(
        self,
        capacity: int = MAX_EVENTS,
        display_length: int = DISPLAY_MESSAGE_LENGTH,
        publish: Optional[Callable[[str], object]] = None,
    ):
        self.capacity = capacity
        self.display_length = display_length
        self.publish = publish
        self._events: Deque[Event] = deque(maxlen=capacity)
        self._lock = asyncio.Lock()

    async def record(self, source: EventSource, message: str, success: bool) -> Event:
        """Prepend a new event, trim to capacity, publish the full log."""
        source = EventSource(source)
        # API messages are caller-controlled and shown in full
        if source != EventSource.API:
            message = truncate_display(message, self.display_length)

        async with self._lock:
            event = Event(source=source, message=message, success=success)
            self._events.appendleft(event)
            if self.publish is not None:
                self.publish(serialize_events(list(self._events)))
        return event

    def snapshot(self) -> List[Event]:
        """Copy of the current log, newest first."""
        return list(self._events)

    def serialize(self) -> str:
        return serialize_events(list(self._events))

    def __len__(self) -> int:
        return len(self._events)
