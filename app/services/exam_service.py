# /app/services/exam_service.py

"""
This module is the business logic layer for exams: creation with questions,
role-aware listing, and the student submission flow with its preliminary
scoring.

The submission flow enforces two rules before anything is written:

1. the exam must be in its active window (start and end inclusive), and
2. a student may submit a given exam only once.

The score is always computed here from the stored questions. The request
carries raw answers only, so a client cannot choose its own score.
"""

import logging
from datetime import datetime
from typing import List, Optional, Union

from ..core.exceptions import NotFoundError, ValidationError, ExamNotActiveError, DuplicateSubmissionError
from ..models import exam_model
from ..models.exam_model import ExamWindow, ExamStatus
from ..models.user_model import CurrentContext
from .access import require_student_profile, visible_classroom_ids, ensure_classroom_visible
from .database_service import DatabaseService
from .database_helpers import mappers
from .database_helpers.sql_base import new_id
from .exam_helpers.lifecycle import classify_window, as_utc, utc_now
from .exam_helpers.scoring import calculate_preliminary_score, unknown_question_ids

logger = logging.getLogger(__name__)


def _get_exam_or_raise(exam_id: str, ctx: CurrentContext, db: DatabaseService):
    exam = db.get_exam(exam_id=exam_id, tenant_id=ctx.tenant_id)
    if exam is None:
        raise NotFoundError(f"Exam with ID {exam_id} not found.")
    ensure_classroom_visible(exam.classroom_id, ctx, db)
    return exam


# --- Listing ---

def get_exams(ctx: CurrentContext, db: DatabaseService, now: Optional[datetime] = None) -> List[exam_model.Exam]:
    """
    Lists the exams visible to the caller, newest first, each with its
    question and submission counts and its current window.
    """
    now = now or utc_now()
    rows = db.get_exams(tenant_id=ctx.tenant_id, classroom_ids=visible_classroom_ids(ctx, db))
    exam_ids = [row.id for row in rows]
    question_counts = db.get_exam_question_counts(exam_ids)
    submission_counts = db.get_exam_submission_counts(exam_ids)
    return [
        mappers.to_exam(row, now, {
            "questions": question_counts.get(row.id, 0),
            "submissions": submission_counts.get(row.id, 0),
        })
        for row in rows
    ]


def get_exam_detail(
    exam_id: str, ctx: CurrentContext, db: DatabaseService, now: Optional[datetime] = None
) -> Union[exam_model.ExamDetail, exam_model.StudentExamDetail]:
    """
    Returns an exam with its ordered questions. Students get the copy without
    correct answers.
    """
    now = now or utc_now()
    exam = _get_exam_or_raise(exam_id, ctx, db)
    questions = [mappers.to_exam_question(q) for q in db.get_exam_questions(exam_id)]
    counts = {
        "questions": len(questions),
        "submissions": db.get_exam_submission_counts([exam_id]).get(exam_id, 0),
    }
    summary = mappers.to_exam(exam, now, counts).model_dump()

    if ctx.is_student:
        student_questions = [exam_model.StudentExamQuestion(**q.model_dump(exclude={"correct_answer"})) for q in questions]
        return exam_model.StudentExamDetail(**summary, questions=student_questions)
    return exam_model.ExamDetail(**summary, questions=questions)


# --- Creation ---

def create_exam(exam_data: exam_model.ExamCreate, ctx: CurrentContext, db: DatabaseService) -> exam_model.Exam:
    """
    Creates an exam and its questions in one go. New exams are published
    straight away; questions are numbered in the order given.
    """
    if db.get_classroom_by_id(classroom_id=exam_data.classroom_id, tenant_id=ctx.tenant_id) is None:
        raise NotFoundError(f"Classroom with ID {exam_data.classroom_id} not found.")

    exam_id = new_id("exm")
    exam_record = {
        "id": exam_id,
        "title": exam_data.title,
        "description": exam_data.description,
        "classroom_id": exam_data.classroom_id,
        "start_time": as_utc(exam_data.start_time),
        "end_time": as_utc(exam_data.end_time),
        "duration_minutes": exam_data.duration_minutes,
        "total_marks": exam_data.total_marks,
        "status": ExamStatus.PUBLISHED.value,
        "tenant_id": ctx.tenant_id,
    }
    question_records = [
        {
            "id": new_id("q"),
            "question_text": q.question_text,
            "question_type": q.question_type.value,
            "options": mappers.encode_options(q.options),
            "correct_answer": q.correct_answer,
            "points": q.points,
            "order": index,
        }
        for index, q in enumerate(exam_data.questions, start=1)
    ]
    new_exam = db.add_exam_with_questions(exam_record, question_records)
    logger.info("Created exam %s with %d questions.", exam_id, len(question_records))
    return mappers.to_exam(new_exam, utc_now(), {"questions": len(question_records), "submissions": 0})


# --- Submission ---

def submit_exam(
    exam_id: str,
    submission: exam_model.ExamSubmissionCreate,
    ctx: CurrentContext,
    db: DatabaseService,
    now: Optional[datetime] = None
) -> exam_model.ExamSubmission:
    """
    Accepts a student's answers while the exam is active and stores them
    with the preliminary score.

    Raises:
        ExamNotActiveError: the exam has not started yet or is already over.
        DuplicateSubmissionError: this student already submitted this exam.
        ValidationError: an answer refers to a question not in this exam.
    """
    now = as_utc(now or utc_now())
    student_id = require_student_profile(ctx)
    exam = _get_exam_or_raise(exam_id, ctx, db)

    window = classify_window(exam.start_time, exam.end_time, now)
    if window != ExamWindow.ACTIVE:
        raise ExamNotActiveError(f"This exam is {window.value}; submissions are only accepted while it is active.")

    if db.get_exam_submission(exam_id=exam_id, student_id=student_id) is not None:
        raise DuplicateSubmissionError("This exam has already been submitted.")

    questions = [mappers.to_exam_question(q) for q in db.get_exam_questions(exam_id)]
    unknown = unknown_question_ids(questions, submission.answers)
    if unknown:
        raise ValidationError(f"Answers reference unknown questions: {', '.join(sorted(unknown))}.")

    score = calculate_preliminary_score(questions, submission.answers)
    new_submission = db.add_exam_submission({
        "id": new_id("esub"),
        "exam_id": exam_id,
        "student_id": student_id,
        "answers": submission.answers,
        "score": score,
        "submitted_at": now,
        "tenant_id": ctx.tenant_id,
    })
    logger.info("Student %s submitted exam %s with preliminary score %s.", student_id, exam_id, score)
    return mappers.to_exam_submission(new_submission)


def get_exam_submissions(exam_id: str, ctx: CurrentContext, db: DatabaseService) -> List[exam_model.ExamSubmission]:
    _get_exam_or_raise(exam_id, ctx, db)
    return [mappers.to_exam_submission(row) for row in db.get_exam_submissions(exam_id=exam_id, tenant_id=ctx.tenant_id)]
