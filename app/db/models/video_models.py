# /app/db/models/video_models.py

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..base_class import Base


class VideoLesson(Base):
    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    classroom_id = Column(String, ForeignKey("classrooms.id"), nullable=False, index=True)
    video_url = Column(String, nullable=False)
    # One of: youtube, vimeo, custom
    provider_type = Column(String, nullable=False, default="custom")
    tenant_id = Column(String, ForeignKey("tenants.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    classroom = relationship("Classroom")
    views = relationship("VideoView", back_populates="video_lesson", cascade="all, delete-orphan")


class VideoView(Base):
    """Per-student watch progress, one row per (video, student)."""
    __table_args__ = (UniqueConstraint("video_lesson_id", "student_id", name="uq_video_view_video_student"),)

    id = Column(String, primary_key=True, index=True)
    video_lesson_id = Column(String, ForeignKey("video_lessons.id"), nullable=False, index=True)
    student_id = Column(String, ForeignKey("student_profiles.id"), nullable=False, index=True)
    watch_seconds = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime(timezone=True), nullable=False)
    tenant_id = Column(String, ForeignKey("tenants.id"), nullable=False, index=True)

    video_lesson = relationship("VideoLesson", back_populates="views")
