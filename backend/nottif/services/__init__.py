"""
Service layer for Nottif.
"""
from nottif.services.broadcaster import Broadcaster, Subscription
from nottif.services.config_store import ConfigStore
from nottif.services.event_log import EventLog
from nottif.services.notifier import AiohttpTransport, Notifier, Transport
from nottif.services.orchestrator import Orchestrator
from nottif.services.scheduler import APSchedulerEngine, ScheduleEngine, Scheduler

__all__ = [
    "Broadcaster",
    "Subscription",
    "ConfigStore",
    "EventLog",
    "AiohttpTransport",
    "Notifier",
    "Transport",
    "Orchestrator",
    "APSchedulerEngine",
    "ScheduleEngine",
    "Scheduler",
]
