# /tests/test_notifications.py

import asyncio
import pytest
from datetime import datetime, timedelta, timezone

from app.core.exceptions import NotFoundError
from app.models.notification_model import Notification, NotificationCreate, NotificationFeed
from app.services import notification_service
from app.services.notification_helpers.channel import (
    NotificationChannel, NotificationCreated, NotificationRead, NotificationsReadAll
)
from app.services.notification_helpers.reducer import reduce_feed, initial_feed


def _notification(nid: str, is_read: bool = False, minutes_ago: int = 0) -> Notification:
    return Notification(
        id=nid, user_id="usr_1", title=f"Title {nid}", body="Body", is_read=is_read,
        created_at=datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc) - timedelta(minutes=minutes_ago),
    )


def _seed(db, user_id, tenant_id, count, is_read=False):
    for i in range(count):
        db.add_notification({
            "id": f"ntf_{user_id}_{i}_{is_read}", "user_id": user_id, "title": "Hello", "body": "World",
            "is_read": is_read, "type": "info", "tenant_id": tenant_id,
            "created_at": datetime(2026, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=i),
        })

# --- Reducer ---

def test_pushed_notification_is_prepended_and_counted():
    feed = initial_feed([_notification("n1", is_read=True)])
    feed = reduce_feed(feed, NotificationCreated(notification=_notification("n2")))
    assert [n.id for n in feed.notifications] == ["n2", "n1"]
    assert feed.unreadCount == 1

def test_duplicate_push_is_ignored():
    feed = initial_feed([_notification("n1")])
    again = reduce_feed(feed, NotificationCreated(notification=_notification("n1")))
    assert again.unreadCount == 1
    assert len(again.notifications) == 1
    print("\n✅ SUCCESS: test_duplicate_push_is_ignored passed.")

def test_reducer_does_not_mutate_its_input():
    feed = initial_feed([_notification("n1")])
    reduce_feed(feed, NotificationsReadAll())
    assert feed.notifications[0].is_read is False
    assert feed.unreadCount == 1

def test_read_events_update_the_count():
    feed = NotificationFeed(notifications=[_notification("n1"), _notification("n2")], unreadCount=5)
    feed = reduce_feed(feed, NotificationRead(notification_id="n1"))
    assert feed.unreadCount == 4
    # Reading it again changes nothing.
    assert reduce_feed(feed, NotificationRead(notification_id="n1")).unreadCount == 4
    assert reduce_feed(feed, NotificationsReadAll()).unreadCount == 0

def test_feed_is_capped_at_the_page_size():
    feed = initial_feed([_notification(f"n{i}") for i in range(3)])
    feed = reduce_feed(feed, NotificationCreated(notification=_notification("new")), limit=3)
    assert len(feed.notifications) == 3
    assert feed.notifications[0].id == "new"
    assert feed.unreadCount == 4

# --- Channel ---

@pytest.mark.asyncio
async def test_channel_delivers_only_to_the_addressed_user():
    channel = NotificationChannel()
    with channel.subscribe("usr_1") as events:
        assert channel.publish("usr_2", NotificationsReadAll()) == 0
        assert channel.publish("usr_1", NotificationCreated(notification=_notification("n1"))) == 1
        event = await asyncio.wait_for(events.__anext__(), timeout=1)
        assert event.notification.id == "n1"
    assert channel.subscriber_count("usr_1") == 0

@pytest.mark.asyncio
async def test_channel_accepts_events_from_worker_threads():
    channel = NotificationChannel()
    with channel.subscribe("usr_1") as events:
        await asyncio.to_thread(channel.publish, "usr_1", NotificationsReadAll())
        event = await asyncio.wait_for(events.__anext__(), timeout=1)
        assert isinstance(event, NotificationsReadAll)

# --- Service with a real store ---

def test_mark_all_as_read_is_idempotent(school, db_service):
    user_id = school.student.user_id
    _seed(db_service, user_id, school.tenant_id, 2)
    _seed(db_service, "usr_teacher", school.tenant_id, 1)

    first = notification_service.mark_all_as_read(school.student_ctx, db_service, channel=NotificationChannel())
    assert first.updated == 2
    assert db_service.count_unread_notifications(user_id) == 0

    second = notification_service.mark_all_as_read(school.student_ctx, db_service, channel=NotificationChannel())
    assert second.updated == 0
    assert second.unreadCount == 0

    # Other users are untouched.
    assert db_service.count_unread_notifications("usr_teacher") == 1
    print("\n✅ SUCCESS: test_mark_all_as_read_is_idempotent passed.")

def test_mark_all_as_read_with_nothing_to_do(school, db_service):
    result = notification_service.mark_all_as_read(school.teacher_ctx, db_service, channel=NotificationChannel())
    assert result.updated == 0

def test_feed_lists_newest_first_with_total_unread(school, db_service):
    user_id = school.student.user_id
    _seed(db_service, user_id, school.tenant_id, 3)
    _seed(db_service, user_id, school.tenant_id, 1, is_read=True)

    feed = notification_service.get_feed(school.student_ctx, db_service, limit=2)
    assert len(feed.notifications) == 2
    assert feed.unreadCount == 3
    assert feed.notifications[0].created_at >= feed.notifications[1].created_at

def test_mark_one_as_read(school, db_service):
    user_id = school.student.user_id
    _seed(db_service, user_id, school.tenant_id, 1)
    nid = f"ntf_{user_id}_0_False"

    notification_service.mark_as_read(nid, school.student_ctx, db_service, channel=NotificationChannel())
    assert db_service.count_unread_notifications(user_id) == 0

    with pytest.raises(NotFoundError):
        notification_service.mark_as_read(nid, school.teacher_ctx, db_service, channel=NotificationChannel())

def test_create_notification_is_pushed_to_the_recipient(school, db_service, mocker):
    channel = NotificationChannel()
    publish = mocker.spy(channel, "publish")
    payload = NotificationCreate(user_id=school.student.user_id, title="Exam tomorrow", body="Room 4")

    created = notification_service.create_notification(payload, school.teacher_ctx, db_service, channel=channel)

    assert created.is_read is False
    publish.assert_called_once()
    assert school.student.user_id in publish.call_args.args

def test_create_notification_for_unknown_user(school, db_service):
    payload = NotificationCreate(user_id="usr_ghost", title="Hi", body="There")
    with pytest.raises(NotFoundError):
        notification_service.create_notification(payload, school.teacher_ctx, db_service, channel=NotificationChannel())
