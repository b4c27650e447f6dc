"""
Data models.
"""
from nottif.models.event import Event, EventSource, serialize_events
from nottif.models.identity import Identity

__all__ = ["Event", "EventSource", "serialize_events", "Identity"]
