# /app/services/database_helpers/homework_repository_sql.py

"""
Raw SQLAlchemy queries for the Homework and HomeworkSubmission tables.
"""

from typing import List, Dict, Optional, Iterable
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import DuplicateSubmissionError
from app.db.models.homework_models import Homework, HomeworkSubmission
from app.db.models.class_student_models import StudentProfile
from .sql_base import translate_store_errors


@translate_store_errors
class HomeworkRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Homework Methods ---

    def get_homeworks(self, tenant_id: str, classroom_ids: Optional[Iterable[str]] = None) -> List[Homework]:
        """Retrieves homework ordered by due date, soonest first."""
        query = (
            self.db.query(Homework)
            .options(joinedload(Homework.classroom))
            .filter(Homework.tenant_id == tenant_id)
        )
        if classroom_ids is not None:
            query = query.filter(Homework.classroom_id.in_(list(classroom_ids)))
        return query.order_by(Homework.due_date.asc(), Homework.id).all()

    def get_homework(self, homework_id: str, tenant_id: str) -> Optional[Homework]:
        return (
            self.db.query(Homework)
            .options(joinedload(Homework.classroom))
            .filter(Homework.id == homework_id, Homework.tenant_id == tenant_id)
            .first()
        )

    def count_homeworks(self, tenant_id: str, classroom_ids: Optional[Iterable[str]] = None) -> int:
        query = self.db.query(func.count(Homework.id)).filter(Homework.tenant_id == tenant_id)
        if classroom_ids is not None:
            query = query.filter(Homework.classroom_id.in_(list(classroom_ids)))
        return query.scalar() or 0

    def add_homework(self, record: Dict) -> Homework:
        new_homework = Homework(**record)
        self.db.add(new_homework)
        self.db.commit()
        self.db.refresh(new_homework)
        return new_homework

    # --- Submission Methods ---

    def get_submissions_for_student(self, student_id: str, homework_ids: List[str]) -> List[HomeworkSubmission]:
        """Only ever returns the given student's own submissions."""
        if not homework_ids:
            return []
        return (
            self.db.query(HomeworkSubmission)
            .filter(HomeworkSubmission.student_id == student_id, HomeworkSubmission.homework_id.in_(homework_ids))
            .all()
        )

    def get_submissions_for_homework(self, homework_id: str, tenant_id: str) -> List[HomeworkSubmission]:
        """
        Every submission of one homework with the submitting student and user
        joined in, ordered by submission time and then id so repeated reads of
        unchanged data come back in the same order.
        """
        return (
            self.db.query(HomeworkSubmission)
            .options(joinedload(HomeworkSubmission.student).joinedload(StudentProfile.user))
            .filter(HomeworkSubmission.homework_id == homework_id, HomeworkSubmission.tenant_id == tenant_id)
            .order_by(HomeworkSubmission.submitted_at.asc(), HomeworkSubmission.id.asc())
            .all()
        )

    def get_submission_by_id(self, submission_id: str, tenant_id: str) -> Optional[HomeworkSubmission]:
        return (
            self.db.query(HomeworkSubmission)
            .filter(HomeworkSubmission.id == submission_id, HomeworkSubmission.tenant_id == tenant_id)
            .first()
        )

    def add_submission(self, record: Dict) -> HomeworkSubmission:
        new_submission = HomeworkSubmission(**record)
        self.db.add(new_submission)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateSubmissionError("This homework has already been submitted.") from e
        self.db.refresh(new_submission)
        return new_submission

    def update_submission_grade(
        self, submission_id: str, tenant_id: str, grade: float, feedback: Optional[str]
    ) -> Optional[HomeworkSubmission]:
        """Sets grade and feedback. Re-grading simply overwrites; last write wins."""
        submission = self.get_submission_by_id(submission_id=submission_id, tenant_id=tenant_id)
        if submission:
            submission.grade = grade
            submission.feedback = feedback
            self.db.commit()
            self.db.refresh(submission)
        return submission
