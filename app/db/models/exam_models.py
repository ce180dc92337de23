# /app/db/models/exam_models.py

"""
This module defines the SQLAlchemy ORM models for exams: the `Exam` itself,
its ordered `ExamQuestion`s, and the `ExamSubmission`s students hand in.
"""

from sqlalchemy import Column, String, Integer, Float, JSON, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..base_class import Base


class Exam(Base):
    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    classroom_id = Column(String, ForeignKey("classrooms.id"), nullable=False, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    total_marks = Column(Float, nullable=False)
    # One of: draft, published, completed
    status = Column(String, nullable=False, default="draft")
    tenant_id = Column(String, ForeignKey("tenants.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    classroom = relationship("Classroom")
    questions = relationship(
        "ExamQuestion", back_populates="exam", cascade="all, delete-orphan", order_by="ExamQuestion.order"
    )
    submissions = relationship("ExamSubmission", back_populates="exam", cascade="all, delete-orphan")


class ExamQuestion(Base):
    """
    A single question of an exam. `options` holds the JSON-encoded list of
    choices for MCQ questions; free-text questions carry no correct answer.
    """
    id = Column(String, primary_key=True, index=True)
    exam_id = Column(String, ForeignKey("exams.id"), nullable=False, index=True)
    question_text = Column(String, nullable=False)
    # One of: MCQ, TrueFalse, ShortAnswer, Essay
    question_type = Column(String, nullable=False)
    options = Column(String, nullable=True)
    correct_answer = Column(String, nullable=True)
    points = Column(Float, nullable=False, default=1)
    order = Column(Integer, nullable=False)

    exam = relationship("Exam", back_populates="questions")


class ExamSubmission(Base):
    """One student's answers to one exam, with the preliminary score."""
    __table_args__ = (UniqueConstraint("exam_id", "student_id", name="uq_exam_submission_exam_student"),)

    id = Column(String, primary_key=True, index=True)
    exam_id = Column(String, ForeignKey("exams.id"), nullable=False, index=True)
    student_id = Column(String, ForeignKey("student_profiles.id"), nullable=False, index=True)
    answers = Column(JSON, nullable=False)
    score = Column(Float, nullable=False, default=0)
    submitted_at = Column(DateTime(timezone=True), nullable=False)
    tenant_id = Column(String, ForeignKey("tenants.id"), nullable=False, index=True)

    exam = relationship("Exam", back_populates="submissions")
    student = relationship("StudentProfile")
