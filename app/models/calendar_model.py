# /app/models/calendar_model.py

from pydantic import BaseModel
from datetime import datetime
from enum import Enum


class CalendarEventType(str, Enum):
    EXAM = "exam"
    LIVE = "live"
    HOMEWORK = "homework"


class CalendarEvent(BaseModel):
    """
    A single dated entry on the unified calendar. Exams and live sessions are
    placed at their start time, homework at its due date.
    """
    id: str
    title: str
    date: datetime
    type: CalendarEventType
