# /app/services/notification_helpers/channel.py

"""
An in-process publish/subscribe channel for notification events.

Each subscription owns an `asyncio.Queue` bound to the event loop it was
opened on. Publishing is safe from any thread: request handlers that run in
FastAPI's threadpool hand events over with `call_soon_threadsafe`.

    with notification_channel.subscribe(user_id) as events:
        async for event in events:
            ...
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Union

from ...models.notification_model import Notification

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationCreated:
    notification: Notification


@dataclass(frozen=True)
class NotificationRead:
    notification_id: str


@dataclass(frozen=True)
class NotificationsReadAll:
    pass


NotificationEvent = Union[NotificationCreated, NotificationRead, NotificationsReadAll]


class Subscription:
    """
    Registered with the channel as soon as it is created, so nothing
    published after `subscribe()` returns can be missed.
    """

    def __init__(self, channel: "NotificationChannel", user_id: str):
        self.user_id = user_id
        self._channel = channel
        self._loop = asyncio.get_running_loop()
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    def deliver(self, event: NotificationEvent) -> None:
        self._loop.call_soon_threadsafe(self._queue.put_nowait, event)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._channel._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> NotificationEvent:
        if self._closed:
            raise StopAsyncIteration
        return await self._queue.get()


class NotificationChannel:
    def __init__(self):
        self._subscriptions: Dict[str, List[Subscription]] = {}

    def subscriber_count(self, user_id: str) -> int:
        return len(self._subscriptions.get(user_id, []))

    def subscribe(self, user_id: str) -> Subscription:
        """Opens a stream of the events published for `user_id`. Must be called from a running loop."""
        subscription = Subscription(self, user_id)
        self._subscriptions.setdefault(user_id, []).append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        subscriptions = self._subscriptions.get(subscription.user_id, [])
        if subscription in subscriptions:
            subscriptions.remove(subscription)
        if not subscriptions:
            self._subscriptions.pop(subscription.user_id, None)

    def publish(self, user_id: str, event: NotificationEvent) -> int:
        """Hands the event to every open subscription of `user_id`. Returns how many received it."""
        delivered = 0
        for subscription in list(self._subscriptions.get(user_id, [])):
            try:
                subscription.deliver(event)
                delivered += 1
            except RuntimeError:
                # The subscriber's event loop has been closed.
                logger.warning("Dropping stale notification subscription for user %s.", user_id)
                subscription.close()
        return delivered


notification_channel = NotificationChannel()
