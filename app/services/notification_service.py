# /app/services/notification_service.py

"""
Business logic for a user's notifications: reading the feed, the one-way
unread -> read transition, and creating notifications that are pushed to the
recipient's open connections.
"""

import logging
from typing import Optional

from ..core.config import NOTIFICATIONS_PAGE_SIZE
from ..core.exceptions import NotFoundError
from ..models import notification_model
from ..models.notification_model import NotificationType
from ..models.user_model import CurrentContext
from .database_service import DatabaseService
from .database_helpers import mappers
from .database_helpers.sql_base import new_id
from .exam_helpers.lifecycle import utc_now
from .notification_helpers.channel import (
    NotificationChannel, NotificationCreated, NotificationRead, NotificationsReadAll, notification_channel
)

logger = logging.getLogger(__name__)


def get_feed(ctx: CurrentContext, db: DatabaseService, limit: int = NOTIFICATIONS_PAGE_SIZE) -> notification_model.NotificationFeed:
    """The caller's newest notifications plus their total unread count."""
    rows = db.get_notifications(user_id=ctx.user_id, limit=limit)
    return notification_model.NotificationFeed(
        notifications=[mappers.to_notification(row) for row in rows],
        unreadCount=db.count_unread_notifications(user_id=ctx.user_id),
    )


def mark_as_read(
    notification_id: str,
    ctx: CurrentContext,
    db: DatabaseService,
    channel: NotificationChannel = notification_channel
) -> None:
    if not db.mark_notification_as_read(notification_id=notification_id, user_id=ctx.user_id):
        raise NotFoundError(f"Notification with ID {notification_id} not found.")
    channel.publish(ctx.user_id, NotificationRead(notification_id=notification_id))


def mark_all_as_read(
    ctx: CurrentContext,
    db: DatabaseService,
    channel: NotificationChannel = notification_channel
) -> notification_model.MarkAllReadResponse:
    """
    Marks every unread notification of the caller as read. Calling it again,
    or with nothing unread, succeeds and reports zero updates.
    """
    updated = db.mark_all_notifications_as_read(user_id=ctx.user_id)
    if updated:
        channel.publish(ctx.user_id, NotificationsReadAll())
    return notification_model.MarkAllReadResponse(updated=updated, unreadCount=0)


def notify_user(
    user_id: str,
    tenant_id: str,
    title: str,
    body: str,
    db: DatabaseService,
    link: Optional[str] = None,
    type: NotificationType = NotificationType.INFO,
    channel: NotificationChannel = notification_channel
) -> notification_model.Notification:
    """Stores a notification for one user and pushes it to their live connections."""
    row = db.add_notification({
        "id": new_id("ntf"),
        "user_id": user_id,
        "title": title,
        "body": body,
        "link": link,
        "type": type.value,
        "is_read": False,
        "tenant_id": tenant_id,
        "created_at": utc_now(),
    })
    notification = mappers.to_notification(row)
    delivered = channel.publish(user_id, NotificationCreated(notification=notification))
    logger.info("Notification %s stored for user %s (pushed to %d connections).", notification.id, user_id, delivered)
    return notification


def create_notification(
    payload: notification_model.NotificationCreate,
    ctx: CurrentContext,
    db: DatabaseService,
    channel: NotificationChannel = notification_channel
) -> notification_model.Notification:
    recipient = db.get_user_by_id(payload.user_id)
    if recipient is None or recipient.tenant_id != ctx.tenant_id:
        raise NotFoundError(f"User with ID {payload.user_id} not found.")
    return notify_user(
        user_id=recipient.id,
        tenant_id=ctx.tenant_id,
        title=payload.title,
        body=payload.body,
        db=db,
        link=payload.link,
        type=payload.type,
        channel=channel,
    )
