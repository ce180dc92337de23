# /tests/test_dashboard_and_calendar.py

import pytest
from datetime import date, timedelta
from types import SimpleNamespace
from unittest.mock import MagicMock

from app.core.exceptions import UpstreamFailureError
from app.models.calendar_model import CalendarEventType
from app.models.user_model import CurrentContext, UserRole
from app.services import calendar_service, dashboard_service

# --- Test Data Fixtures ---

@pytest.fixture
def teacher_ctx():
    return CurrentContext(user_id="usr_t", tenant_id="ten_1", role=UserRole.TEACHER)

@pytest.fixture
def student_ctx():
    return CurrentContext(user_id="usr_s", tenant_id="ten_1", role=UserRole.STUDENT, student_profile_id="stu_1")

@pytest.fixture
def mock_db_service():
    """Provides a mock DatabaseService with healthy counts for every metric."""
    db = MagicMock()
    db.count_students.return_value = 5
    db.count_classrooms.return_value = 3
    db.count_exams.return_value = 7
    db.count_homeworks.return_value = 4
    db.count_live_sessions_starting_after.return_value = 2
    db.get_classroom_ids_for_student.return_value = ["cls_1", "cls_2"]
    return db

@pytest.fixture
def db_factory(mock_db_service):
    """Hands the same mock to every branch and counts how many were opened."""
    factory = MagicMock(return_value=mock_db_service)
    return factory

# --- Dashboard ---

@pytest.mark.asyncio
async def test_staff_summary(teacher_ctx, db_factory, mock_db_service):
    summary = await dashboard_service.get_summary_data(teacher_ctx, db_factory)
    assert summary.students == 5
    assert summary.classrooms == 3
    assert summary.exams == 7
    assert summary.liveSessions == 2
    assert summary.homework == 0
    # One session per branch, each closed again.
    assert db_factory.call_count == 4
    assert mock_db_service.close.call_count == 4

@pytest.mark.asyncio
async def test_failed_branch_reports_zero_and_others_survive(teacher_ctx, db_factory, mock_db_service):
    mock_db_service.count_classrooms.side_effect = UpstreamFailureError("classrooms table unavailable")

    summary = await dashboard_service.get_summary_data(teacher_ctx, db_factory)

    assert summary.classrooms == 0
    assert summary.students == 5
    assert summary.exams == 7
    assert mock_db_service.close.call_count == 4
    print("\n✅ SUCCESS: test_failed_branch_reports_zero_and_others_survive passed.")

@pytest.mark.asyncio
async def test_every_branch_failing_still_returns_a_summary(teacher_ctx, db_factory, mock_db_service):
    for name in ("count_students", "count_classrooms", "count_exams", "count_live_sessions_starting_after"):
        getattr(mock_db_service, name).side_effect = RuntimeError("boom")
    summary = await dashboard_service.get_summary_data(teacher_ctx, db_factory)
    assert summary.model_dump() == {"students": 0, "classrooms": 0, "exams": 0, "homework": 0, "liveSessions": 0}

@pytest.mark.asyncio
async def test_student_summary_uses_enrolled_classrooms(student_ctx, db_factory, mock_db_service):
    summary = await dashboard_service.get_summary_data(student_ctx, db_factory)
    assert summary.classrooms == 2
    assert summary.exams == 7
    assert summary.homework == 4
    assert summary.liveSessions == 2
    assert summary.students == 0
    mock_db_service.count_exams.assert_called_with("ten_1", ["cls_1", "cls_2"])
    mock_db_service.count_students.assert_not_called()

@pytest.mark.asyncio
async def test_parent_summary_is_all_zeros(db_factory):
    ctx = CurrentContext(user_id="usr_p", tenant_id="ten_1", role=UserRole.PARENT)
    summary = await dashboard_service.get_summary_data(ctx, db_factory)
    assert summary.model_dump() == {"students": 0, "classrooms": 0, "exams": 0, "homework": 0, "liveSessions": 0}
    db_factory.assert_not_called()

@pytest.mark.asyncio
async def test_live_sessions_count_uses_now(teacher_ctx, db_factory, mock_db_service, now):
    await dashboard_service.get_summary_data(teacher_ctx, db_factory, now=now)
    mock_db_service.count_live_sessions_starting_after.assert_called_once_with("ten_1", now)

# --- Calendar ---

def _row(rid, title, **times):
    return SimpleNamespace(id=rid, title=title, **times)

@pytest.mark.asyncio
async def test_calendar_merges_sources_in_date_order(teacher_ctx, db_factory, mock_db_service, now):
    mock_db_service.get_exams.return_value = [_row("exm_1", "Midterm", start_time=now + timedelta(days=2))]
    mock_db_service.get_live_sessions.return_value = [_row("live_1", "Review", start_time=now + timedelta(days=1))]
    mock_db_service.get_homeworks.return_value = [_row("hw_1", "Essay", due_date=now + timedelta(days=3))]

    events = await calendar_service.get_events(teacher_ctx, db_factory)

    assert [e.id for e in events] == ["live_1", "exm_1", "hw_1"]
    assert [e.type for e in events] == [CalendarEventType.LIVE, CalendarEventType.EXAM, CalendarEventType.HOMEWORK]

@pytest.mark.asyncio
async def test_calendar_skips_a_failed_source(teacher_ctx, db_factory, mock_db_service, now):
    mock_db_service.get_exams.side_effect = UpstreamFailureError("down")
    mock_db_service.get_live_sessions.return_value = []
    mock_db_service.get_homeworks.return_value = [_row("hw_1", "Essay", due_date=now)]

    events = await calendar_service.get_events(teacher_ctx, db_factory)
    assert [e.id for e in events] == ["hw_1"]

@pytest.mark.asyncio
async def test_calendar_day_filter(teacher_ctx, db_factory, mock_db_service, now):
    mock_db_service.get_exams.return_value = [
        _row("exm_today", "Quiz", start_time=now),
        _row("exm_later", "Final", start_time=now + timedelta(days=5)),
    ]
    mock_db_service.get_live_sessions.return_value = []
    mock_db_service.get_homeworks.return_value = []

    events = await calendar_service.get_events(teacher_ctx, db_factory, day=date(2026, 3, 10))
    assert [e.id for e in events] == ["exm_today"]
