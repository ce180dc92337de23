# /app/services/database_helpers/exam_repository_sql.py

"""
Raw SQLAlchemy queries for the Exam, ExamQuestion and ExamSubmission tables.
All reads are scoped by `tenant_id`; student-facing reads additionally take
the list of classrooms the student is enrolled in.
"""

from typing import List, Dict, Optional, Iterable
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import DuplicateSubmissionError
from app.db.models.exam_models import Exam, ExamQuestion, ExamSubmission
from .sql_base import translate_store_errors


@translate_store_errors
class ExamRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Exam Methods ---

    def get_exams(self, tenant_id: str, classroom_ids: Optional[Iterable[str]] = None) -> List[Exam]:
        """
        Retrieves the tenant's exams, newest first. When `classroom_ids` is
        given, only exams of those classrooms are returned.
        """
        query = (
            self.db.query(Exam)
            .options(joinedload(Exam.classroom))
            .filter(Exam.tenant_id == tenant_id)
        )
        if classroom_ids is not None:
            query = query.filter(Exam.classroom_id.in_(list(classroom_ids)))
        return query.order_by(Exam.created_at.desc(), Exam.id).all()

    def get_exam(self, exam_id: str, tenant_id: str) -> Optional[Exam]:
        return (
            self.db.query(Exam)
            .options(joinedload(Exam.classroom))
            .filter(Exam.id == exam_id, Exam.tenant_id == tenant_id)
            .first()
        )

    def count_exams(self, tenant_id: str, classroom_ids: Optional[Iterable[str]] = None) -> int:
        query = self.db.query(func.count(Exam.id)).filter(Exam.tenant_id == tenant_id)
        if classroom_ids is not None:
            query = query.filter(Exam.classroom_id.in_(list(classroom_ids)))
        return query.scalar() or 0

    def add_exam_with_questions(self, exam_record: Dict, question_records: List[Dict]) -> Exam:
        """Creates an exam and all of its questions in one transaction."""
        new_exam = Exam(**exam_record)
        self.db.add(new_exam)
        for record in question_records:
            self.db.add(ExamQuestion(exam_id=new_exam.id, **record))
        self.db.commit()
        self.db.refresh(new_exam)
        return new_exam

    def get_question_counts(self, exam_ids: List[str]) -> Dict[str, int]:
        if not exam_ids:
            return {}
        rows = (
            self.db.query(ExamQuestion.exam_id, func.count(ExamQuestion.id))
            .filter(ExamQuestion.exam_id.in_(exam_ids))
            .group_by(ExamQuestion.exam_id)
            .all()
        )
        return {exam_id: count for exam_id, count in rows}

    def get_submission_counts(self, exam_ids: List[str]) -> Dict[str, int]:
        if not exam_ids:
            return {}
        rows = (
            self.db.query(ExamSubmission.exam_id, func.count(ExamSubmission.id))
            .filter(ExamSubmission.exam_id.in_(exam_ids))
            .group_by(ExamSubmission.exam_id)
            .all()
        )
        return {exam_id: count for exam_id, count in rows}

    # --- Question Methods ---

    def get_questions(self, exam_id: str) -> List[ExamQuestion]:
        return self.db.query(ExamQuestion).filter(ExamQuestion.exam_id == exam_id).order_by(ExamQuestion.order).all()

    # --- Submission Methods ---

    def get_submission(self, exam_id: str, student_id: str) -> Optional[ExamSubmission]:
        return (
            self.db.query(ExamSubmission)
            .filter(ExamSubmission.exam_id == exam_id, ExamSubmission.student_id == student_id)
            .first()
        )

    def get_submissions_for_exam(self, exam_id: str, tenant_id: str) -> List[ExamSubmission]:
        return (
            self.db.query(ExamSubmission)
            .filter(ExamSubmission.exam_id == exam_id, ExamSubmission.tenant_id == tenant_id)
            .order_by(ExamSubmission.submitted_at, ExamSubmission.id)
            .all()
        )

    def add_submission(self, record: Dict) -> ExamSubmission:
        """
        Stores a submission. A second submission for the same (exam, student)
        pair hits the unique constraint and is reported as a duplicate, never
        written over the first one.
        """
        new_submission = ExamSubmission(**record)
        self.db.add(new_submission)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateSubmissionError("This exam has already been submitted.") from e
        self.db.refresh(new_submission)
        return new_submission
