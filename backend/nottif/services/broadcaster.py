"""
Fan-out of event log snapshots to live subscribers.
"""
import asyncio
import uuid
from typing import Dict, Optional

from loguru import logger

from nottif.constants import SUBSCRIBER_QUEUE_SIZE


class Subscription:
    """
    One observer's queue of pending snapshots.

    Async-iterable: yields payloads in publish order and stops once the
    subscription is closed (unsubscribed, dropped or broadcaster shut down).
    """

    def __init__(self, queue_size: int = SUBSCRIBER_QUEUE_SIZE):
        self.id = uuid.uuid4().hex[:8]
        # One extra slot reserved for the close sentinel
        self._queue: asyncio.Queue[Optional[str]] = asyncio.Queue(maxsize=queue_size + 1)
        self._queue_size = queue_size
        self.closed = False

    def offer(self, payload: str) -> bool:
        """Queue a payload without waiting. False means the subscriber is full."""
        if self.closed or self._queue.qsize() >= self._queue_size:
            return False
        self._queue.put_nowait(payload)
        return True

    def close(self):
        """Stop iteration after the payloads already queued."""
        if self.closed:
            return
        self.closed = True
        self._queue.put_nowait(None)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def __aiter__(self):
        return self

    async def __anext__(self) -> str:
        payload = await self._queue.get()
        if payload is None:
            raise StopAsyncIteration
        return payload


class Broadcaster:
    """
    Owns the set of subscribers; reachable only through subscribe,
    unsubscribe and publish.

    ``publish`` never waits on a subscriber: one whose queue is full is
    dropped as if it had disconnected.
    """

    def __init__(self, queue_size: int = SUBSCRIBER_QUEUE_SIZE):
        self.queue_size = queue_size
        self._subscribers: Dict[str, Subscription] = {}

    def subscribe(self) -> Subscription:
        subscription = Subscription(self.queue_size)
        self._subscribers[subscription.id] = subscription
        logger.info(f"Event subscriber {subscription.id} connected ({len(self._subscribers)} active)")
        return subscription

    def unsubscribe(self, subscription: Subscription):
        """Remove and close a subscription. Safe to call more than once."""
        if self._subscribers.pop(subscription.id, None) is not None:
            logger.info(f"Event subscriber {subscription.id} disconnected ({len(self._subscribers)} active)")
        subscription.close()

    def publish(self, payload: str) -> int:
        """Offer a payload to every subscriber. Returns how many accepted it."""
        delivered = 0
        for subscription in list(self._subscribers.values()):
            if subscription.offer(payload):
                delivered += 1
            else:
                logger.warning(f"Event subscriber {subscription.id} is not keeping up - dropping")
                self._subscribers.pop(subscription.id, None)
                subscription.close()
        return delivered

    def close_all(self):
        for subscription in list(self._subscribers.values()):
            self.unsubscribe(subscription)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
