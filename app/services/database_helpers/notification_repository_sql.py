# /app/services/database_helpers/notification_repository_sql.py

from typing import List, Dict
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.models.notification_models import Notification
from .sql_base import translate_store_errors


@translate_store_errors
class NotificationRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_notifications(self, user_id: str, limit: int) -> List[Notification]:
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
            .all()
        )

    def count_unread(self, user_id: str) -> int:
        return (
            self.db.query(func.count(Notification.id))
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .scalar()
            or 0
        )

    def add_notification(self, record: Dict) -> Notification:
        new_notification = Notification(**record)
        self.db.add(new_notification)
        self.db.commit()
        self.db.refresh(new_notification)
        return new_notification

    def mark_as_read(self, notification_id: str, user_id: str) -> bool:
        """Returns False when the notification does not exist or belongs to someone else."""
        notification = (
            self.db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )
        if not notification:
            return False
        notification.is_read = True
        self.db.commit()
        return True

    def mark_all_as_read(self, user_id: str) -> int:
        """
        Flips only this user's unread rows. Running it again matches nothing
        and returns 0.
        """
        updated = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session=False)
        )
        self.db.commit()
        return updated
