# /app/services/homework_service.py

"""
This module is the business logic layer for homework assignments and the
per-student submission workflow:

    pending -> submitted -> graded       (or pending -> overdue)

Students see each assignment with only their own submission and its derived
state. Teachers see every submission with the student's name and code, and
grade on a 0-10 scale. A grade outside the range is rejected before anything
is written.
"""

import logging
from datetime import datetime
from typing import List, Optional

from ..core.exceptions import NotFoundError, DomainError, DuplicateSubmissionError
from ..models import homework_model
from ..models.notification_model import NotificationType
from ..models.user_model import CurrentContext
from . import notification_service
from .access import require_student_profile, visible_classroom_ids, ensure_classroom_visible
from .database_service import DatabaseService
from .database_helpers import mappers
from .database_helpers.sql_base import new_id
from .exam_helpers.lifecycle import as_utc, utc_now
from .homework_helpers.workflow import derive_state, ensure_submission_window_open, validate_grade

logger = logging.getLogger(__name__)


def _get_homework_or_raise(homework_id: str, ctx: CurrentContext, db: DatabaseService):
    homework = db.get_homework(homework_id=homework_id, tenant_id=ctx.tenant_id)
    if homework is None:
        raise NotFoundError(f"Homework with ID {homework_id} not found.")
    ensure_classroom_visible(homework.classroom_id, ctx, db)
    return homework


# --- Listing ---

def get_homeworks(ctx: CurrentContext, db: DatabaseService) -> List[homework_model.Homework]:
    """All assignments of the tenant, earliest due date first (staff view)."""
    return [mappers.to_homework(row) for row in db.get_homeworks(tenant_id=ctx.tenant_id)]


def get_student_homeworks(
    ctx: CurrentContext, db: DatabaseService, now: Optional[datetime] = None
) -> List[homework_model.StudentHomework]:
    """
    The assignments of the student's classrooms, each joined with at most the
    student's own submission and the resulting workflow state.
    """
    student_id = require_student_profile(ctx)
    now = now or utc_now()
    rows = db.get_homeworks(tenant_id=ctx.tenant_id, classroom_ids=visible_classroom_ids(ctx, db))
    submissions = {
        s.homework_id: mappers.to_homework_submission(s)
        for s in db.get_homework_submissions_for_student(student_id=student_id, homework_ids=[r.id for r in rows])
    }

    result = []
    for row in rows:
        submission = submissions.get(row.id)
        result.append(homework_model.StudentHomework(
            **mappers.to_homework(row).model_dump(),
            submission=submission,
            state=derive_state(row.due_date, submission, now),
        ))
    return result


# --- Creation ---

def create_homework(homework_data: homework_model.HomeworkCreate, ctx: CurrentContext, db: DatabaseService) -> homework_model.Homework:
    if db.get_classroom_by_id(classroom_id=homework_data.classroom_id, tenant_id=ctx.tenant_id) is None:
        raise NotFoundError(f"Classroom with ID {homework_data.classroom_id} not found.")
    record = {
        "id": new_id("hw"),
        "title": homework_data.title,
        "description": homework_data.description,
        "classroom_id": homework_data.classroom_id,
        "due_date": as_utc(homework_data.due_date),
        "tenant_id": ctx.tenant_id,
    }
    return mappers.to_homework(db.add_homework(record))


# --- Submission ---

def submit_homework(
    homework_id: str,
    submission: homework_model.HomeworkSubmissionCreate,
    ctx: CurrentContext,
    db: DatabaseService,
    now: Optional[datetime] = None
) -> homework_model.HomeworkSubmission:
    """
    Records the student's one submission for an assignment.

    Raises:
        SubmissionWindowClosedError: the due date has passed.
        DuplicateSubmissionError: the student already submitted.
    """
    now = as_utc(now or utc_now())
    student_id = require_student_profile(ctx)
    homework = _get_homework_or_raise(homework_id, ctx, db)
    ensure_submission_window_open(homework.due_date, now)

    if db.get_homework_submissions_for_student(student_id=student_id, homework_ids=[homework_id]):
        raise DuplicateSubmissionError("This homework has already been submitted.")

    new_submission = db.add_homework_submission({
        "id": new_id("hsub"),
        "homework_id": homework_id,
        "student_id": student_id,
        "content": submission.content,
        "submitted_at": now,
        "tenant_id": ctx.tenant_id,
    })
    logger.info("Student %s submitted homework %s.", student_id, homework_id)
    return mappers.to_homework_submission(new_submission)


def get_submissions(homework_id: str, ctx: CurrentContext, db: DatabaseService) -> List[homework_model.HomeworkSubmission]:
    """Every submission of an assignment, with the student's name and code, oldest first."""
    _get_homework_or_raise(homework_id, ctx, db)
    rows = db.get_homework_submissions(homework_id=homework_id, tenant_id=ctx.tenant_id)
    return [mappers.to_homework_submission(row, include_student=True) for row in rows]


# --- Grading ---

def grade_submission(
    submission_id: str,
    grade_data: homework_model.GradeRequest,
    ctx: CurrentContext,
    db: DatabaseService
) -> homework_model.HomeworkSubmission:
    """
    Sets the grade and feedback of a submission. Re-grading overwrites the
    previous values. The student is notified afterwards.
    """
    grade = validate_grade(grade_data.grade)
    updated = db.update_homework_submission_grade(
        submission_id=submission_id, tenant_id=ctx.tenant_id, grade=grade, feedback=grade_data.feedback
    )
    if updated is None:
        raise NotFoundError(f"Submission with ID {submission_id} not found.")

    graded = mappers.to_homework_submission(updated, include_student=True)
    _notify_student_of_grade(updated, graded, ctx, db)
    return graded


def _notify_student_of_grade(row, graded: homework_model.HomeworkSubmission, ctx: CurrentContext, db: DatabaseService) -> None:
    student = getattr(row, "student", None)
    if student is None:
        return
    try:
        notification_service.notify_user(
            user_id=student.user_id,
            tenant_id=ctx.tenant_id,
            title="Homework graded",
            body=f"Your submission received {graded.grade:g}/10.",
            db=db,
            type=NotificationType.SUCCESS,
        )
    except DomainError as e:
        # The grade is already stored; a failed notification must not undo it.
        logger.warning("Could not notify student %s about grade on %s: %s", student.id, graded.id, e.message)
