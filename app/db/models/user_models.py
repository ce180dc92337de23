# /app/db/models/user_models.py

"""
This module defines the SQLAlchemy ORM models for the `Tenant` and `User`
entities. A tenant is the organisational scope (an individual teacher, a
center or a school) that partitions every other table in the system.
"""

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..base_class import Base


class Tenant(Base):
    """SQLAlchemy model representing an organisational scope."""
    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    # One of: individual, center, school
    type = Column(String, nullable=False, default="individual")
    logo_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    users = relationship("User", back_populates="tenant")


class User(Base):
    """
    SQLAlchemy model representing an authenticated identity.

    Students are provisioned by a teacher with a username and no email;
    teachers register with an email. Either may be used to sign in.
    """
    id = Column(String, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=True)
    username = Column(String, unique=True, index=True, nullable=True)
    name = Column(String, nullable=False)
    # One of: Teacher, Student, Parent, Supervisor, Admin
    role = Column(String, nullable=False, index=True)
    hashed_password = Column(String, nullable=True)
    tenant_id = Column(String, ForeignKey("tenants.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    tenant = relationship("Tenant", back_populates="users")
    student_profile = relationship("StudentProfile", back_populates="user", uselist=False)
