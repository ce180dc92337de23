# /tests/test_live_sessions_and_videos.py

import pytest
from datetime import timedelta
from sqlalchemy import text

from app.core.exceptions import NotFoundError, PermissionDeniedError
from app.models.live_session_model import LiveSessionCreate, SessionStatus
from app.models.video_model import VideoLessonCreate, ViewProgressUpdate, ProviderType
from app.services import live_session_service, video_service


@pytest.fixture
def upcoming_session(school, db_service, now):
    return live_session_service.create_session(
        LiveSessionCreate(title="Algebra review", classroom_id=school.classroom_id,
                          start_time=now + timedelta(hours=1), end_time=now + timedelta(hours=2),
                          stream_url="https://meet.example.com/algebra"),
        school.teacher_ctx, db_service,
    )


@pytest.fixture
def video(school, db_service):
    return video_service.create_video(
        VideoLessonCreate(title="Fractions", classroom_id=school.classroom_id,
                          video_url="https://youtu.be/abc", provider_type=ProviderType.YOUTUBE),
        school.teacher_ctx, db_service,
    )

# --- Live Sessions ---

def test_session_status_follows_the_clock(school, db_service, upcoming_session, now):
    assert upcoming_session.teacher_id == "usr_teacher"
    assert live_session_service.get_sessions(school.teacher_ctx, db_service, now)[0].status == SessionStatus.SCHEDULED
    during = now + timedelta(hours=1, minutes=30)
    assert live_session_service.get_sessions(school.student_ctx, db_service, during)[0].status == SessionStatus.LIVE
    assert live_session_service.get_sessions(school.outsider_ctx, db_service, now) == []

def test_joining_twice_records_attendance_once(school, db_service, upcoming_session, now):
    first = live_session_service.join_session(upcoming_session.id, school.student_ctx, db_service, now)
    second = live_session_service.join_session(upcoming_session.id, school.student_ctx, db_service, now)

    assert first.stream_url == "https://meet.example.com/algebra"
    assert second.session_id == upcoming_session.id
    assert db_service.session.execute(
        text("SELECT COUNT(*) FROM live_session_attendance")
    ).scalar() == 1

def test_only_students_join(school, db_service, upcoming_session):
    with pytest.raises(PermissionDeniedError):
        live_session_service.join_session(upcoming_session.id, school.teacher_ctx, db_service)

def test_outsider_cannot_join(school, db_service, upcoming_session):
    with pytest.raises(NotFoundError):
        live_session_service.join_session(upcoming_session.id, school.outsider_ctx, db_service)

# --- Videos ---

def test_progress_upsert_keeps_one_row_and_last_value_wins(school, db_service, video, now):
    video_service.update_progress(video.id, ViewProgressUpdate(seconds_watched=120), school.student_ctx, db_service, now)
    latest = video_service.update_progress(video.id, ViewProgressUpdate(seconds_watched=45), school.student_ctx,
                                           db_service, now + timedelta(minutes=5))
    assert latest.watch_seconds == 45
    assert latest.student_id == school.student.id

def test_videos_are_visible_to_enrolled_students_only(school, db_service, video):
    assert [v.id for v in video_service.get_videos(school.student_ctx, db_service)] == [video.id]
    assert video_service.get_videos(school.outsider_ctx, db_service) == []

def test_progress_for_unknown_video(school, db_service):
    with pytest.raises(NotFoundError):
        video_service.update_progress("vid_missing", ViewProgressUpdate(seconds_watched=1), school.student_ctx, db_service)
