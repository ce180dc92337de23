# /app/db/models/homework_models.py

from sqlalchemy import Column, String, Float, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..base_class import Base


class Homework(Base):
    __tablename__ = "homework"

    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    classroom_id = Column(String, ForeignKey("classrooms.id"), nullable=False, index=True)
    due_date = Column(DateTime(timezone=True), nullable=False)
    tenant_id = Column(String, ForeignKey("tenants.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    classroom = relationship("Classroom")
    submissions = relationship("HomeworkSubmission", back_populates="homework", cascade="all, delete-orphan")


class HomeworkSubmission(Base):
    """
    A student's answer to a homework. Once created, only the grading action
    (grade + feedback) may change it.
    """
    __table_args__ = (UniqueConstraint("homework_id", "student_id", name="uq_homework_submission_homework_student"),)

    id = Column(String, primary_key=True, index=True)
    homework_id = Column(String, ForeignKey("homework.id"), nullable=False, index=True)
    student_id = Column(String, ForeignKey("student_profiles.id"), nullable=False, index=True)
    content = Column(String, nullable=False)
    grade = Column(Float, nullable=True)
    feedback = Column(String, nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=False)
    tenant_id = Column(String, ForeignKey("tenants.id"), nullable=False, index=True)

    homework = relationship("Homework", back_populates="submissions")
    student = relationship("StudentProfile")
