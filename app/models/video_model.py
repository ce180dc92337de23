# /app/models/video_model.py

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime
from enum import Enum


class ProviderType(str, Enum):
    YOUTUBE = "youtube"
    VIMEO = "vimeo"
    CUSTOM = "custom"


class VideoLessonCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    classroom_id: str
    video_url: str = Field(..., min_length=1)
    provider_type: ProviderType = Field(default=ProviderType.CUSTOM)


class VideoLesson(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    classroom_id: str
    classroom_name: Optional[str] = None
    video_url: str
    provider_type: ProviderType
    created_at: Optional[datetime] = None


class ViewProgressUpdate(BaseModel):
    seconds_watched: int = Field(..., ge=0)


class ViewProgress(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    video_lesson_id: str
    student_id: str
    watch_seconds: int
    last_updated: datetime
