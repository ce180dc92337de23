# /tests/conftest.py

import pytest
from types import SimpleNamespace
from datetime import datetime, timezone
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.models.user_model import CurrentContext, UserRole
from app.services.database_service import DatabaseService

# A fixed "now" keeps the time-window tests deterministic.
NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def session_factory():
    """A fresh in-memory SQLite database per test, shared by every session opened on it."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db_service(session_factory):
    service = DatabaseService(db_session=session_factory())
    yield service
    service.close()


def _provision(db: DatabaseService, tenant_id: str, suffix: str):
    user_id = f"usr_student_{suffix}"
    return db.provision_student(
        {"id": user_id, "username": f"student_{suffix}", "name": f"Student {suffix.upper()}",
         "role": UserRole.STUDENT.value, "tenant_id": tenant_id},
        {"id": f"stu_{suffix}", "user_id": user_id, "grade": "Grade 7", "level": "Middle", "tenant_id": tenant_id},
    )


@pytest.fixture
def school(db_service):
    """
    One tenant with a teacher, a classroom, an enrolled student ("a") and a
    student who is not enrolled anywhere ("b").
    """
    tenant_id = "ten_school"
    db_service.add_tenant_with_owner(
        {"id": tenant_id, "name": "Test School", "type": "school"},
        {"id": "usr_teacher", "email": "teacher@example.com", "name": "Ms. Teacher",
         "role": UserRole.TEACHER.value, "tenant_id": tenant_id},
    )
    db_service.add_classroom({"id": "cls_math", "name": "Math 7A", "level": "Middle", "grade": "Grade 7",
                              "teacher_id": "usr_teacher", "tenant_id": tenant_id})
    enrolled = _provision(db_service, tenant_id, "a")
    outsider = _provision(db_service, tenant_id, "b")
    db_service.add_enrollment({"id": "enr_1", "classroom_id": "cls_math", "student_id": enrolled.id, "tenant_id": tenant_id})

    return SimpleNamespace(
        tenant_id=tenant_id,
        classroom_id="cls_math",
        student=enrolled,
        outsider=outsider,
        teacher_ctx=CurrentContext(user_id="usr_teacher", tenant_id=tenant_id, role=UserRole.TEACHER),
        student_ctx=CurrentContext(user_id=enrolled.user_id, tenant_id=tenant_id, role=UserRole.STUDENT,
                                   student_profile_id=enrolled.id),
        outsider_ctx=CurrentContext(user_id=outsider.user_id, tenant_id=tenant_id, role=UserRole.STUDENT,
                                    student_profile_id=outsider.id),
    )
