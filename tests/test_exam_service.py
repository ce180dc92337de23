# /tests/test_exam_service.py

import pytest
from datetime import timedelta
from unittest.mock import MagicMock
from types import SimpleNamespace

from app.core.exceptions import (
    DuplicateSubmissionError, ExamNotActiveError, NotFoundError, PermissionDeniedError, ValidationError
)
from app.models.exam_model import (
    ExamCreate, ExamQuestionCreate, ExamSubmissionCreate, ExamWindow, QuestionType, StudentExamDetail
)
from app.models.user_model import CurrentContext, UserRole
from app.services import exam_service

# --- Helpers ---

def _create_exam(school, db, start, end):
    payload = ExamCreate(
        title="Unit Test", classroom_id=school.classroom_id, start_time=start, end_time=end,
        duration_minutes=45, total_marks=10,
        questions=[
            ExamQuestionCreate(question_text="Capital of France?", question_type=QuestionType.MCQ,
                               options=["Paris", "Rome"], correct_answer="Paris", points=2),
            ExamQuestionCreate(question_text="Water boils at 100C at sea level.",
                               question_type=QuestionType.TRUE_FALSE, correct_answer="True", points=3),
            ExamQuestionCreate(question_text="Describe the water cycle.", question_type=QuestionType.ESSAY, points=5),
        ],
    )
    exam = exam_service.create_exam(payload, school.teacher_ctx, db)
    questions = db.get_exam_questions(exam.id)
    return exam, questions


@pytest.fixture
def active_exam(school, db_service, now):
    return _create_exam(school, db_service, now - timedelta(minutes=10), now + timedelta(minutes=50))

# --- Creation and Listing ---

def test_create_exam_numbers_questions_in_order(school, db_service, active_exam):
    exam, questions = active_exam
    assert exam.question_count == 3
    assert exam.status.value == "published"
    assert [q.order for q in questions] == [1, 2, 3]

def test_create_exam_requires_an_existing_classroom(school, db_service, now):
    payload = ExamCreate(title="X", classroom_id="cls_missing", start_time=now, end_time=now,
                         duration_minutes=10, total_marks=1)
    with pytest.raises(NotFoundError):
        exam_service.create_exam(payload, school.teacher_ctx, db_service)

def test_objective_question_without_answer_is_rejected():
    with pytest.raises(ValueError):
        ExamQuestionCreate(question_text="?", question_type=QuestionType.MCQ, options=["a"])

def test_students_only_list_exams_of_their_classrooms(school, db_service, active_exam, now):
    assert len(exam_service.get_exams(school.student_ctx, db_service, now)) == 1
    assert exam_service.get_exams(school.outsider_ctx, db_service, now) == []
    listed = exam_service.get_exams(school.teacher_ctx, db_service, now)
    assert listed[0].window == ExamWindow.ACTIVE
    assert listed[0].classroom_name == "Math 7A"

def test_student_detail_hides_correct_answers(school, db_service, active_exam, now):
    exam, _ = active_exam
    detail = exam_service.get_exam_detail(exam.id, school.student_ctx, db_service, now)
    assert isinstance(detail, StudentExamDetail)
    assert all("correct_answer" not in q.model_dump() for q in detail.questions)

    staff_detail = exam_service.get_exam_detail(exam.id, school.teacher_ctx, db_service, now)
    assert staff_detail.questions[0].correct_answer == "Paris"

def test_outsider_cannot_see_exam(school, db_service, active_exam, now):
    exam, _ = active_exam
    with pytest.raises(NotFoundError):
        exam_service.get_exam_detail(exam.id, school.outsider_ctx, db_service, now)

# --- Submission ---

def test_submit_computes_preliminary_score(school, db_service, active_exam, now):
    exam, questions = active_exam
    answers = {q.id: (q.correct_answer or "my essay") for q in questions}
    submission = exam_service.submit_exam(exam.id, ExamSubmissionCreate(answers=answers), school.student_ctx, db_service, now)
    assert submission.score == 5
    assert submission.student_id == school.student.id
    print("\n✅ SUCCESS: test_submit_computes_preliminary_score passed.")

def test_wrong_answers_score_zero(school, db_service, active_exam, now):
    exam, questions = active_exam
    answers = {questions[0].id: "Rome", questions[1].id: "False"}
    submission = exam_service.submit_exam(exam.id, ExamSubmissionCreate(answers=answers), school.student_ctx, db_service, now)
    assert submission.score == 0

def test_second_submission_is_rejected_and_first_is_kept(school, db_service, active_exam, now):
    exam, questions = active_exam
    first = ExamSubmissionCreate(answers={questions[0].id: "Paris"})
    exam_service.submit_exam(exam.id, first, school.student_ctx, db_service, now)

    with pytest.raises(DuplicateSubmissionError):
        exam_service.submit_exam(exam.id, ExamSubmissionCreate(answers={questions[0].id: "Rome"}),
                                 school.student_ctx, db_service, now)

    stored = exam_service.get_exam_submissions(exam.id, school.teacher_ctx, db_service)
    assert len(stored) == 1
    assert stored[0].score == 2

@pytest.mark.parametrize("offset", [timedelta(hours=2), timedelta(hours=-2)])
def test_submit_outside_window_is_rejected(school, db_service, now, offset):
    exam, questions = _create_exam(school, db_service, now + offset, now + offset + timedelta(minutes=30))
    with pytest.raises(ExamNotActiveError):
        exam_service.submit_exam(exam.id, ExamSubmissionCreate(answers={questions[0].id: "Paris"}),
                                 school.student_ctx, db_service, now)
    assert db_service.get_exam_submission(exam.id, school.student.id) is None

def test_submit_at_exact_end_is_accepted(school, db_service, now):
    exam, questions = _create_exam(school, db_service, now - timedelta(hours=1), now)
    submission = exam_service.submit_exam(exam.id, ExamSubmissionCreate(answers={questions[0].id: "Paris"}),
                                          school.student_ctx, db_service, now)
    assert submission.score == 2

def test_answers_to_unknown_questions_are_rejected(school, db_service, active_exam, now):
    exam, _ = active_exam
    with pytest.raises(ValidationError):
        exam_service.submit_exam(exam.id, ExamSubmissionCreate(answers={"q_other": "x"}), school.student_ctx, db_service, now)

def test_teacher_cannot_submit(school, db_service, active_exam, now):
    exam, _ = active_exam
    with pytest.raises(PermissionDeniedError):
        exam_service.submit_exam(exam.id, ExamSubmissionCreate(answers={}), school.teacher_ctx, db_service, now)

def test_student_without_profile_cannot_submit(now):
    ctx = CurrentContext(user_id="usr_x", tenant_id="ten_x", role=UserRole.STUDENT)
    with pytest.raises(NotFoundError):
        exam_service.submit_exam("exm_1", ExamSubmissionCreate(answers={}), ctx, MagicMock(), now)

def test_inactive_exam_never_reaches_the_store(now):
    """The window check runs before any write is attempted."""
    mock_db = MagicMock()
    mock_db.get_exam.return_value = SimpleNamespace(
        id="exm_1", classroom_id="cls_1", start_time=now + timedelta(days=1), end_time=now + timedelta(days=2)
    )
    mock_db.get_classroom_ids_for_student.return_value = ["cls_1"]
    ctx = CurrentContext(user_id="usr_s", tenant_id="ten_1", role=UserRole.STUDENT, student_profile_id="stu_1")

    with pytest.raises(ExamNotActiveError):
        exam_service.submit_exam("exm_1", ExamSubmissionCreate(answers={}), ctx, mock_db, now)
    mock_db.add_exam_submission.assert_not_called()
