# /app/services/database_helpers/mappers.py

"""
One mapping function per entity, turning ORM rows (and their joined
relations) into the canonical Pydantic contract models. Every reshaping of
store rows happens here and nowhere else: unwrapping joined classroom or
student records, decoding the JSON option lists of exam questions, and
attaching the derived time-window states.
"""

import json
from datetime import datetime
from typing import Dict, List, Optional

from ...models.user_model import User
from ...models.student_model import StudentWithUser
from ...models.class_model import Classroom, ClassroomSummary
from ...models.exam_model import Exam, ExamQuestion, ExamSubmission
from ...models.homework_model import Homework, HomeworkSubmission
from ...models.live_session_model import LiveSession
from ...models.video_model import VideoLesson, ViewProgress
from ...models.notification_model import Notification
from ..exam_helpers.lifecycle import classify_window, session_status


def _classroom_name(row) -> Optional[str]:
    classroom = getattr(row, "classroom", None)
    return classroom.name if classroom is not None else None


def decode_options(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    decoded = json.loads(raw)
    return [str(option) for option in decoded] if isinstance(decoded, list) else []


def encode_options(options: Optional[List[str]]) -> Optional[str]:
    return json.dumps(options, ensure_ascii=False) if options else None


def to_user(row) -> User:
    return User.model_validate(row)


def to_student(row) -> StudentWithUser:
    return StudentWithUser(
        id=row.id,
        user_id=row.user_id,
        student_code=row.student_code,
        grade=row.grade,
        level=row.level,
        tenant_id=row.tenant_id,
        user=to_user(row.user),
    )


def to_classroom(row) -> Classroom:
    return Classroom.model_validate(row)


def to_classroom_summary(row, enrollment_count: int) -> ClassroomSummary:
    return ClassroomSummary(**to_classroom(row).model_dump(), enrollment_count=enrollment_count)


def to_exam_question(row) -> ExamQuestion:
    return ExamQuestion(
        id=row.id,
        question_text=row.question_text,
        question_type=row.question_type,
        options=decode_options(row.options),
        correct_answer=row.correct_answer,
        points=row.points,
        order=row.order,
    )


def to_exam(row, now: datetime, counts: Optional[Dict[str, int]] = None) -> Exam:
    counts = counts or {}
    return Exam(
        id=row.id,
        title=row.title,
        description=row.description,
        classroom_id=row.classroom_id,
        classroom_name=_classroom_name(row),
        start_time=row.start_time,
        end_time=row.end_time,
        duration_minutes=row.duration_minutes,
        total_marks=row.total_marks,
        status=row.status,
        window=classify_window(row.start_time, row.end_time, now),
        question_count=counts.get("questions", 0),
        submission_count=counts.get("submissions", 0),
    )


def to_exam_submission(row) -> ExamSubmission:
    answers = row.answers
    if isinstance(answers, str):
        answers = json.loads(answers)
    return ExamSubmission(
        id=row.id,
        exam_id=row.exam_id,
        student_id=row.student_id,
        answers=answers or {},
        score=row.score,
        submitted_at=row.submitted_at,
    )


def to_homework(row) -> Homework:
    return Homework(
        id=row.id,
        title=row.title,
        description=row.description,
        classroom_id=row.classroom_id,
        classroom_name=_classroom_name(row),
        due_date=row.due_date,
        created_at=row.created_at,
    )


def to_homework_submission(row, include_student: bool = False) -> HomeworkSubmission:
    submission = HomeworkSubmission(
        id=row.id,
        homework_id=row.homework_id,
        student_id=row.student_id,
        content=row.content,
        grade=row.grade,
        feedback=row.feedback,
        submitted_at=row.submitted_at,
    )
    if include_student and row.student is not None:
        submission.student_code = row.student.student_code
        submission.student_name = row.student.user.name if row.student.user else None
    return submission


def to_live_session(row, now: datetime) -> LiveSession:
    return LiveSession(
        id=row.id,
        title=row.title,
        description=row.description,
        classroom_id=row.classroom_id,
        classroom_name=_classroom_name(row),
        teacher_id=row.teacher_id,
        start_time=row.start_time,
        end_time=row.end_time,
        stream_url=row.stream_url,
        status=session_status(row.start_time, row.end_time, now),
    )


def to_video_lesson(row) -> VideoLesson:
    return VideoLesson(
        id=row.id,
        title=row.title,
        description=row.description,
        classroom_id=row.classroom_id,
        classroom_name=_classroom_name(row),
        video_url=row.video_url,
        provider_type=row.provider_type,
        created_at=row.created_at,
    )


def to_view_progress(row) -> ViewProgress:
    return ViewProgress.model_validate(row)


def to_notification(row) -> Notification:
    return Notification.model_validate(row)
