# /app/db/models/live_session_models.py

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..base_class import Base


class LiveSession(Base):
    """
    A scheduled live stream for a classroom. The stored `status` is only the
    value written at creation; readers derive the effective status from the
    session's start and end time.
    """
    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    classroom_id = Column(String, ForeignKey("classrooms.id"), nullable=False, index=True)
    teacher_id = Column(String, ForeignKey("users.id"), nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    stream_url = Column(String, nullable=False)
    status = Column(String, nullable=False, default="scheduled")
    tenant_id = Column(String, ForeignKey("tenants.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    classroom = relationship("Classroom")
    attendance = relationship("LiveSessionAttendance", back_populates="live_session", cascade="all, delete-orphan")


class LiveSessionAttendance(Base):
    __tablename__ = "live_session_attendance"
    __table_args__ = (UniqueConstraint("live_session_id", "student_id", name="uq_attendance_session_student"),)

    id = Column(String, primary_key=True, index=True)
    live_session_id = Column(String, ForeignKey("live_sessions.id"), nullable=False, index=True)
    student_id = Column(String, ForeignKey("student_profiles.id"), nullable=False, index=True)
    join_time = Column(DateTime(timezone=True), nullable=False)
    tenant_id = Column(String, ForeignKey("tenants.id"), nullable=False, index=True)

    live_session = relationship("LiveSession", back_populates="attendance")
