# /app/db/models/class_student_models.py

"""
This module defines the SQLAlchemy ORM models for the roster: a
`StudentProfile` per student user, the `Classroom` grouping, and the
`Enrollment` link between them.
"""

from sqlalchemy import Column, String, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..base_class import Base


class StudentProfile(Base):
    """
    SQLAlchemy model holding the academic details of a student user.
    `student_code` is the human-readable code used for quick lookups and is
    unique across the entire system, not just within a tenant.
    """
    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, unique=True)
    student_code = Column(String, unique=True, index=True, nullable=False)
    grade = Column(String, nullable=False)
    level = Column(String, nullable=False)
    date_of_birth = Column(Date, nullable=True)
    tenant_id = Column(String, ForeignKey("tenants.id"), nullable=False, index=True)

    user = relationship("User", back_populates="student_profile")
    enrollments = relationship("Enrollment", back_populates="student", cascade="all, delete-orphan")


class Classroom(Base):
    """SQLAlchemy model representing a named group of students."""
    id = Column(String, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    level = Column(String, nullable=False)
    grade = Column(String, nullable=False)
    teacher_id = Column(String, ForeignKey("users.id"), nullable=True)
    tenant_id = Column(String, ForeignKey("tenants.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Deleting a classroom removes its enrollments, never the students.
    enrollments = relationship("Enrollment", back_populates="classroom", cascade="all, delete-orphan")


class Enrollment(Base):
    """Links one StudentProfile to one Classroom. The pair is unique."""
    __table_args__ = (UniqueConstraint("classroom_id", "student_id", name="uq_enrollment_classroom_student"),)

    id = Column(String, primary_key=True, index=True)
    classroom_id = Column(String, ForeignKey("classrooms.id"), nullable=False, index=True)
    student_id = Column(String, ForeignKey("student_profiles.id"), nullable=False, index=True)
    tenant_id = Column(String, ForeignKey("tenants.id"), nullable=False, index=True)
    enrolled_at = Column(DateTime(timezone=True), server_default=func.now())

    classroom = relationship("Classroom", back_populates="enrollments")
    student = relationship("StudentProfile", back_populates="enrollments")
