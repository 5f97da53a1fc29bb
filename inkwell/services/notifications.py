#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Notification fan-out
====================
In-process broadcast of article events to live subscribers (WebSocket
clients).  Delivery is best-effort: publish never blocks, a subscriber whose
queue is full misses the event, and nothing is replayed on reconnect.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Optional


# -----------------------------------------------------------------------------

from inkwell.schemas import NotificationEvent

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

class SubscriberLimitReached(Exception):
    pass


# -----------------------------------------------------------------------------

class Subscription:
    """One subscriber's bounded queue.  ``None`` on the queue means closed."""

    def __init__(self, queue_size: int):
        self.id = uuid.uuid4().hex
        self.queue: asyncio.Queue[Optional[NotificationEvent]] = asyncio.Queue(maxsize=queue_size)
        self.dropped = 0
        self.closed = False

    async def get(self) -> Optional[NotificationEvent]:
        """Next event, or None once the notifier has been closed."""
        if self.closed and self.queue.empty():
            return None
        return await self.queue.get()

    def offer(self, event: NotificationEvent) -> bool:
        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            return False
        return True

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        # Make room for the sentinel so a blocked get() wakes up.
        while self.queue.full():
            self.queue.get_nowait()
            self.dropped += 1
        self.queue.put_nowait(None)


# -----------------------------------------------------------------------------

class Notifier:

    def __init__(self, max_subscribers: int = 100, queue_size: int = 64):
        self.max_subscribers = max_subscribers
        self.queue_size = queue_size
        self._subscribers: dict[str, Subscription] = {}

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> Subscription:
        if len(self._subscribers) >= self.max_subscribers:
            raise SubscriberLimitReached(
                f"Subscriber limit of {self.max_subscribers} reached"
            )
        sub = Subscription(self.queue_size)
        self._subscribers[sub.id] = sub
        logger.info("Subscriber %s connected (%d active)", sub.id, len(self._subscribers))
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        if self._subscribers.pop(sub.id, None) is not None:
            sub.close()
            logger.info("Subscriber %s disconnected (%d active)", sub.id, len(self._subscribers))

    def publish(self, event: NotificationEvent) -> int:
        """Offer ``event`` to every subscriber; returns how many accepted it."""
        delivered = 0
        for sub in list(self._subscribers.values()):
            if sub.offer(event):
                delivered += 1
            else:
                logger.debug("Dropped %s for subscriber %s (queue full)", event.type, sub.id)
        return delivered

    def close(self) -> None:
        for sub in list(self._subscribers.values()):
            sub.close()
        self._subscribers.clear()


# -----------------------------------------------------------------------------
