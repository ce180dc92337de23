# /app/models/live_session_model.py

from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Optional
from datetime import datetime
from enum import Enum


class SessionStatus(str, Enum):
    SCHEDULED = "scheduled"
    LIVE = "live"
    ENDED = "ended"


class LiveSessionCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    classroom_id: str
    start_time: datetime
    end_time: datetime
    stream_url: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def end_not_before_start(self):
        if self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time.")
        return self


class LiveSession(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    classroom_id: str
    classroom_name: Optional[str] = None
    teacher_id: str
    start_time: datetime
    end_time: datetime
    stream_url: str
    status: SessionStatus = Field(..., description="Derived from the current time, never read from storage.")


class JoinSessionResponse(BaseModel):
    session_id: str
    stream_url: str
