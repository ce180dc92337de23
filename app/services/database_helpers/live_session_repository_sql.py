# /app/services/database_helpers/live_session_repository_sql.py

import logging
from datetime import datetime
from typing import List, Dict, Optional, Iterable
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.db.models.live_session_models import LiveSession, LiveSessionAttendance
from .sql_base import translate_store_errors

logger = logging.getLogger(__name__)


@translate_store_errors
class LiveSessionRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_sessions(self, tenant_id: str, classroom_ids: Optional[Iterable[str]] = None) -> List[LiveSession]:
        query = (
            self.db.query(LiveSession)
            .options(joinedload(LiveSession.classroom))
            .filter(LiveSession.tenant_id == tenant_id)
        )
        if classroom_ids is not None:
            query = query.filter(LiveSession.classroom_id.in_(list(classroom_ids)))
        return query.order_by(LiveSession.start_time.asc(), LiveSession.id).all()

    def get_session(self, session_id: str, tenant_id: str) -> Optional[LiveSession]:
        return (
            self.db.query(LiveSession)
            .options(joinedload(LiveSession.classroom))
            .filter(LiveSession.id == session_id, LiveSession.tenant_id == tenant_id)
            .first()
        )

    def count_sessions_starting_after(
        self, tenant_id: str, instant: datetime, classroom_ids: Optional[Iterable[str]] = None
    ) -> int:
        """Counts sessions that have not started yet at `instant`."""
        query = (
            self.db.query(func.count(LiveSession.id))
            .filter(LiveSession.tenant_id == tenant_id, LiveSession.start_time > instant)
        )
        if classroom_ids is not None:
            query = query.filter(LiveSession.classroom_id.in_(list(classroom_ids)))
        return query.scalar() or 0

    def add_session(self, record: Dict) -> LiveSession:
        new_session = LiveSession(**record)
        self.db.add(new_session)
        self.db.commit()
        self.db.refresh(new_session)
        return new_session

    def add_attendance(self, record: Dict) -> bool:
        """
        Records a join. A repeated join (e.g. the student reloading the page)
        hits the unique constraint and is ignored; the first join time is kept.
        """
        self.db.add(LiveSessionAttendance(**record))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info(
                "Student %s already joined session %s; ignoring.",
                record.get("student_id"), record.get("live_session_id")
            )
            return False
        return True
