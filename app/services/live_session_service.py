# /app/services/live_session_service.py

import logging
from datetime import datetime
from typing import List, Optional

from ..core.exceptions import NotFoundError
from ..models import live_session_model
from ..models.user_model import CurrentContext
from .access import require_student_profile, visible_classroom_ids, ensure_classroom_visible
from .database_service import DatabaseService
from .database_helpers import mappers
from .database_helpers.sql_base import new_id
from .exam_helpers.lifecycle import as_utc, utc_now

logger = logging.getLogger(__name__)


def get_sessions(ctx: CurrentContext, db: DatabaseService, now: Optional[datetime] = None) -> List[live_session_model.LiveSession]:
    """Sessions visible to the caller, soonest first, with their status as of `now`."""
    now = now or utc_now()
    rows = db.get_live_sessions(tenant_id=ctx.tenant_id, classroom_ids=visible_classroom_ids(ctx, db))
    return [mappers.to_live_session(row, now) for row in rows]


def create_session(
    session_data: live_session_model.LiveSessionCreate, ctx: CurrentContext, db: DatabaseService
) -> live_session_model.LiveSession:
    if db.get_classroom_by_id(classroom_id=session_data.classroom_id, tenant_id=ctx.tenant_id) is None:
        raise NotFoundError(f"Classroom with ID {session_data.classroom_id} not found.")
    record = {
        "id": new_id("live"),
        "title": session_data.title,
        "description": session_data.description,
        "classroom_id": session_data.classroom_id,
        "teacher_id": ctx.user_id,
        "start_time": as_utc(session_data.start_time),
        "end_time": as_utc(session_data.end_time),
        "stream_url": session_data.stream_url,
        "tenant_id": ctx.tenant_id,
    }
    return mappers.to_live_session(db.add_live_session(record), utc_now())


def join_session(
    session_id: str, ctx: CurrentContext, db: DatabaseService, now: Optional[datetime] = None
) -> live_session_model.JoinSessionResponse:
    """
    Records the student's attendance and hands back the stream URL. Joining
    the same session again is fine; attendance is only recorded once.
    """
    student_id = require_student_profile(ctx)
    session = db.get_live_session(session_id=session_id, tenant_id=ctx.tenant_id)
    if session is None:
        raise NotFoundError(f"Live session with ID {session_id} not found.")
    ensure_classroom_visible(session.classroom_id, ctx, db)

    recorded = db.add_attendance({
        "id": new_id("att"),
        "live_session_id": session_id,
        "student_id": student_id,
        "join_time": as_utc(now or utc_now()),
        "tenant_id": ctx.tenant_id,
    })
    if not recorded:
        logger.info("Student %s re-joined live session %s.", student_id, session_id)
    return live_session_model.JoinSessionResponse(session_id=session.id, stream_url=session.stream_url)
