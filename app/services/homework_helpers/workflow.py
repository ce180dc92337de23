# /app/services/homework_helpers/workflow.py

"""
The per-(homework, student) state machine.

    pending   --submit (before due)-->  submitted  --grade-->  graded
    pending   --due date passes----->   overdue
    graded    --grade-->                graded   (overwrites grade/feedback)

Submitting after the due date is rejected; the due date itself is still
inside the window.
"""

from datetime import datetime
from typing import Optional

from ...core.config import MIN_HOMEWORK_GRADE, MAX_HOMEWORK_GRADE
from ...core.exceptions import InvalidGradeError, SubmissionWindowClosedError
from ...models.homework_model import HomeworkState, HomeworkSubmission
from ..exam_helpers.lifecycle import as_utc, utc_now


def derive_state(
    due_date: datetime,
    submission: Optional[HomeworkSubmission],
    now: Optional[datetime] = None
) -> HomeworkState:
    if submission is not None:
        return HomeworkState.GRADED if submission.grade is not None else HomeworkState.SUBMITTED
    if as_utc(now or utc_now()) > as_utc(due_date):
        return HomeworkState.OVERDUE
    return HomeworkState.PENDING


def ensure_submission_window_open(due_date: datetime, now: Optional[datetime] = None) -> None:
    if as_utc(now or utc_now()) > as_utc(due_date):
        raise SubmissionWindowClosedError("The due date for this homework has passed.")


def validate_grade(grade: float) -> float:
    """Rejects grades outside the inclusive 0-10 range before anything is persisted."""
    if grade is None or not (MIN_HOMEWORK_GRADE <= grade <= MAX_HOMEWORK_GRADE):
        raise InvalidGradeError(
            f"Grade must be between {MIN_HOMEWORK_GRADE:g} and {MAX_HOMEWORK_GRADE:g}, got {grade}."
        )
    return float(grade)
