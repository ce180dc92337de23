# /app/services/exam_helpers/lifecycle.py

"""
Time-window classification shared by exams and live sessions.

A window is `upcoming` before its start, `active` from start to end with both
bounds inclusive, and `expired` after its end. The result is never stored; it
is recomputed against the current instant on every read.
"""

from datetime import datetime, timezone
from typing import Optional

from ...models.exam_model import ExamWindow
from ...models.live_session_model import SessionStatus

_SESSION_STATUS_BY_WINDOW = {
    ExamWindow.UPCOMING: SessionStatus.SCHEDULED,
    ExamWindow.ACTIVE: SessionStatus.LIVE,
    ExamWindow.EXPIRED: SessionStatus.ENDED,
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Normalises a datetime for comparison. SQLite hands back naive values even
    for timezone-aware columns; those are taken to be UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def classify_window(start_time: datetime, end_time: datetime, now: Optional[datetime] = None) -> ExamWindow:
    now = as_utc(now or utc_now())
    if now < as_utc(start_time):
        return ExamWindow.UPCOMING
    if now > as_utc(end_time):
        return ExamWindow.EXPIRED
    return ExamWindow.ACTIVE


def session_status(start_time: datetime, end_time: datetime, now: Optional[datetime] = None) -> SessionStatus:
    """Live-session flavour of `classify_window`: scheduled, live or ended."""
    return _SESSION_STATUS_BY_WINDOW[classify_window(start_time, end_time, now)]
