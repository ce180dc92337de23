# /app/services/notification_helpers/reducer.py

"""
The single owner of the notification feed state.

Everything that changes a feed (a pushed notification, marking one read,
marking all read) goes through `reduce_feed`, which returns a new feed and
never mutates its input. A pushed notification whose id is already in the
list is ignored, so a push that races the initial fetch cannot double count.
"""

from ...core.config import NOTIFICATIONS_PAGE_SIZE
from ...models.notification_model import NotificationFeed
from .channel import NotificationEvent, NotificationCreated, NotificationRead, NotificationsReadAll


def _count_unread(notifications) -> int:
    return sum(1 for n in notifications if not n.is_read)


def reduce_feed(feed: NotificationFeed, event: NotificationEvent, limit: int = NOTIFICATIONS_PAGE_SIZE) -> NotificationFeed:
    if isinstance(event, NotificationCreated):
        incoming = event.notification
        if any(n.id == incoming.id for n in feed.notifications):
            return feed
        unread = feed.unreadCount + (0 if incoming.is_read else 1)
        return NotificationFeed(notifications=[incoming, *feed.notifications][:limit], unreadCount=unread)

    if isinstance(event, NotificationRead):
        changed = False
        notifications = []
        for n in feed.notifications:
            if n.id == event.notification_id and not n.is_read:
                n = n.model_copy(update={"is_read": True})
                changed = True
            notifications.append(n)
        unread = max(feed.unreadCount - 1, 0) if changed else feed.unreadCount
        return NotificationFeed(notifications=notifications, unreadCount=unread)

    if isinstance(event, NotificationsReadAll):
        notifications = [n.model_copy(update={"is_read": True}) if not n.is_read else n for n in feed.notifications]
        return NotificationFeed(notifications=notifications, unreadCount=0)

    raise TypeError(f"Unknown notification event: {event!r}")


def initial_feed(notifications, unread_count: int = None) -> NotificationFeed:
    """Builds the starting feed; the unread count defaults to what the list itself shows."""
    count = _count_unread(notifications) if unread_count is None else unread_count
    return NotificationFeed(notifications=list(notifications), unreadCount=count)
