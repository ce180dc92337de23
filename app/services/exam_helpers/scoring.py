# /app/services/exam_helpers/scoring.py

from typing import Dict, Iterable

from ...models.exam_model import ExamQuestion, AUTO_GRADED_TYPES


def calculate_preliminary_score(questions: Iterable[ExamQuestion], answers: Dict[str, str]) -> float:
    """
    Computes the automatic part of an exam score.

    Each MCQ or TrueFalse question awards its points when the submitted answer
    equals the stored correct answer exactly: case sensitive, no trimming.
    ShortAnswer and Essay questions contribute nothing here and are left for
    manual review.
    """
    score = 0.0
    for question in questions:
        if question.question_type not in AUTO_GRADED_TYPES:
            continue
        if question.correct_answer is None:
            continue
        if answers.get(question.id) == question.correct_answer:
            score += question.points
    return score


def unknown_question_ids(questions: Iterable[ExamQuestion], answers: Dict[str, str]) -> set:
    """Returns the answer keys that do not belong to any question of the exam."""
    known = {q.id for q in questions}
    return set(answers) - known
