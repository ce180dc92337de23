# /app/services/database_service.py

from datetime import datetime
from typing import List, Dict, Optional, Generator, Iterable, Callable
from sqlalchemy.orm import Session
from fastapi import Depends

# --- Core Database Setup ---
from app.db.database import get_db, SessionLocal

# --- Repository Imports ---
from .database_helpers.user_repository_sql import UserRepositorySQL
from .database_helpers.class_student_repository_sql import ClassStudentRepositorySQL
from .database_helpers.exam_repository_sql import ExamRepositorySQL
from .database_helpers.homework_repository_sql import HomeworkRepositorySQL
from .database_helpers.live_session_repository_sql import LiveSessionRepositorySQL
from .database_helpers.video_repository_sql import VideoRepositorySQL
from .database_helpers.notification_repository_sql import NotificationRepositorySQL


class DatabaseService:
    def __init__(self, db_session: Session):
        """
        Initializes the DatabaseService facade over one SQLAlchemy session.
        Services only ever talk to this facade, never to a repository directly.
        """
        self.session = db_session
        self.user_repo = UserRepositorySQL(db_session)
        self.class_student_repo = ClassStudentRepositorySQL(db_session)
        self.exam_repo = ExamRepositorySQL(db_session)
        self.homework_repo = HomeworkRepositorySQL(db_session)
        self.live_session_repo = LiveSessionRepositorySQL(db_session)
        self.video_repo = VideoRepositorySQL(db_session)
        self.notification_repo = NotificationRepositorySQL(db_session)

    def close(self):
        self.session.close()

    # --- USER & AUTH METHODS (DELEGATED) ---
    def get_user_by_id(self, user_id: str): return self.user_repo.get_user_by_id(user_id)
    def get_user_by_email(self, email: str): return self.user_repo.get_user_by_email(email)
    def get_user_by_login(self, login: str): return self.user_repo.get_user_by_login(login)
    def get_student_profile_id(self, user_id: str) -> Optional[str]: return self.user_repo.get_student_profile_id(user_id)
    def add_tenant_with_owner(self, tenant_record: Dict, user_record: Dict): return self.user_repo.add_tenant_with_owner(tenant_record, user_record)

    # --- STUDENT METHODS (DELEGATED) ---
    def get_all_students(self, tenant_id: str) -> List: return self.class_student_repo.get_all_students(tenant_id)
    def get_student_by_id(self, student_id: str, tenant_id: str): return self.class_student_repo.get_student_by_id(student_id, tenant_id)
    def get_student_by_code(self, student_code: str, tenant_id: str): return self.class_student_repo.get_student_by_code(student_code, tenant_id)
    def count_students(self, tenant_id: str) -> int: return self.class_student_repo.count_students(tenant_id)
    def provision_student(self, user_record: Dict, profile_record: Dict): return self.class_student_repo.provision_student(user_record, profile_record)

    # --- CLASSROOM & ENROLLMENT METHODS (DELEGATED) ---
    def get_all_classrooms(self, tenant_id: str) -> List: return self.class_student_repo.get_all_classrooms(tenant_id)
    def get_classroom_by_id(self, classroom_id: str, tenant_id: str): return self.class_student_repo.get_classroom_by_id(classroom_id, tenant_id)
    def add_classroom(self, record: Dict): return self.class_student_repo.add_classroom(record)
    def count_classrooms(self, tenant_id: str) -> int: return self.class_student_repo.count_classrooms(tenant_id)
    def get_classroom_ids_for_student(self, student_id: str, tenant_id: str) -> List[str]: return self.class_student_repo.get_classroom_ids_for_student(student_id, tenant_id)
    def get_enrollment_rows(self, tenant_id: str) -> List[Dict]: return self.class_student_repo.get_enrollment_rows(tenant_id)
    def get_enrolled_students(self, classroom_id: str, tenant_id: str) -> List: return self.class_student_repo.get_enrolled_students(classroom_id, tenant_id)
    def is_enrolled(self, classroom_id: str, student_id: str) -> bool: return self.class_student_repo.is_enrolled(classroom_id, student_id)
    def add_enrollment(self, record: Dict) -> bool: return self.class_student_repo.add_enrollment(record)
    def delete_enrollment(self, classroom_id: str, student_id: str, tenant_id: str) -> bool: return self.class_student_repo.delete_enrollment(classroom_id, student_id, tenant_id)

    # --- EXAM METHODS (DELEGATED) ---
    def get_exams(self, tenant_id: str, classroom_ids: Optional[Iterable[str]] = None) -> List: return self.exam_repo.get_exams(tenant_id, classroom_ids)
    def get_exam(self, exam_id: str, tenant_id: str): return self.exam_repo.get_exam(exam_id, tenant_id)
    def count_exams(self, tenant_id: str, classroom_ids: Optional[Iterable[str]] = None) -> int: return self.exam_repo.count_exams(tenant_id, classroom_ids)
    def add_exam_with_questions(self, exam_record: Dict, question_records: List[Dict]): return self.exam_repo.add_exam_with_questions(exam_record, question_records)
    def get_exam_question_counts(self, exam_ids: List[str]) -> Dict[str, int]: return self.exam_repo.get_question_counts(exam_ids)
    def get_exam_submission_counts(self, exam_ids: List[str]) -> Dict[str, int]: return self.exam_repo.get_submission_counts(exam_ids)
    def get_exam_questions(self, exam_id: str) -> List: return self.exam_repo.get_questions(exam_id)
    def get_exam_submission(self, exam_id: str, student_id: str): return self.exam_repo.get_submission(exam_id, student_id)
    def get_exam_submissions(self, exam_id: str, tenant_id: str) -> List: return self.exam_repo.get_submissions_for_exam(exam_id, tenant_id)
    def add_exam_submission(self, record: Dict): return self.exam_repo.add_submission(record)

    # --- HOMEWORK METHODS (DELEGATED) ---
    def get_homeworks(self, tenant_id: str, classroom_ids: Optional[Iterable[str]] = None) -> List: return self.homework_repo.get_homeworks(tenant_id, classroom_ids)
    def get_homework(self, homework_id: str, tenant_id: str): return self.homework_repo.get_homework(homework_id, tenant_id)
    def count_homeworks(self, tenant_id: str, classroom_ids: Optional[Iterable[str]] = None) -> int: return self.homework_repo.count_homeworks(tenant_id, classroom_ids)
    def add_homework(self, record: Dict): return self.homework_repo.add_homework(record)
    def get_homework_submissions_for_student(self, student_id: str, homework_ids: List[str]) -> List: return self.homework_repo.get_submissions_for_student(student_id, homework_ids)
    def get_homework_submissions(self, homework_id: str, tenant_id: str) -> List: return self.homework_repo.get_submissions_for_homework(homework_id, tenant_id)
    def get_homework_submission_by_id(self, submission_id: str, tenant_id: str): return self.homework_repo.get_submission_by_id(submission_id, tenant_id)
    def add_homework_submission(self, record: Dict): return self.homework_repo.add_submission(record)
    def update_homework_submission_grade(self, submission_id: str, tenant_id: str, grade: float, feedback: Optional[str]):
        return self.homework_repo.update_submission_grade(submission_id, tenant_id, grade, feedback)

    # --- LIVE SESSION METHODS (DELEGATED) ---
    def get_live_sessions(self, tenant_id: str, classroom_ids: Optional[Iterable[str]] = None) -> List: return self.live_session_repo.get_sessions(tenant_id, classroom_ids)
    def get_live_session(self, session_id: str, tenant_id: str): return self.live_session_repo.get_session(session_id, tenant_id)
    def count_live_sessions_starting_after(self, tenant_id: str, instant: datetime, classroom_ids: Optional[Iterable[str]] = None) -> int:
        return self.live_session_repo.count_sessions_starting_after(tenant_id, instant, classroom_ids)
    def add_live_session(self, record: Dict): return self.live_session_repo.add_session(record)
    def add_attendance(self, record: Dict) -> bool: return self.live_session_repo.add_attendance(record)

    # --- VIDEO METHODS (DELEGATED) ---
    def get_videos(self, tenant_id: str, classroom_ids: Optional[Iterable[str]] = None) -> List: return self.video_repo.get_videos(tenant_id, classroom_ids)
    def get_video(self, video_id: str, tenant_id: str): return self.video_repo.get_video(video_id, tenant_id)
    def add_video(self, record: Dict): return self.video_repo.add_video(record)
    def upsert_video_view(self, video_id: str, student_id: str, tenant_id: str, watch_seconds: int, updated_at: datetime):
        return self.video_repo.upsert_view(video_id, student_id, tenant_id, watch_seconds, updated_at)

    # --- NOTIFICATION METHODS (DELEGATED) ---
    def get_notifications(self, user_id: str, limit: int) -> List: return self.notification_repo.get_notifications(user_id, limit)
    def count_unread_notifications(self, user_id: str) -> int: return self.notification_repo.count_unread(user_id)
    def add_notification(self, record: Dict): return self.notification_repo.add_notification(record)
    def mark_notification_as_read(self, notification_id: str, user_id: str) -> bool: return self.notification_repo.mark_as_read(notification_id, user_id)
    def mark_all_notifications_as_read(self, user_id: str) -> int: return self.notification_repo.mark_all_as_read(user_id)


# --- DEPENDENCY PROVIDERS ---

def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """FastAPI dependency that provides a DatabaseService bound to the request's session."""
    yield DatabaseService(db_session=db)


DatabaseServiceFactory = Callable[[], DatabaseService]


def new_db_service() -> DatabaseService:
    """
    Opens a DatabaseService on a fresh session. Used where work fans out to
    worker threads, since a session must not be shared between threads.
    The caller is responsible for `close()`.
    """
    return DatabaseService(db_session=SessionLocal())


def get_db_service_factory() -> DatabaseServiceFactory:
    """FastAPI dependency that provides the factory above (overridable in tests)."""
    return new_db_service
