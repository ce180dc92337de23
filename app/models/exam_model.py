# /app/models/exam_model.py

from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Optional, List, Dict
from datetime import datetime
from enum import Enum

# --- Core Enumerations ---
class QuestionType(str, Enum):
    MCQ = "MCQ"
    TRUE_FALSE = "TrueFalse"
    SHORT_ANSWER = "ShortAnswer"
    ESSAY = "Essay"

# Question types whose answers can be checked automatically on submission.
AUTO_GRADED_TYPES = frozenset({QuestionType.MCQ, QuestionType.TRUE_FALSE})

class ExamStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    COMPLETED = "completed"

class ExamWindow(str, Enum):
    """The temporal state of an exam, derived from its start and end time."""
    UPCOMING = "upcoming"
    ACTIVE = "active"
    EXPIRED = "expired"

# --- Questions ---

class ExamQuestionCreate(BaseModel):
    question_text: str = Field(..., min_length=1)
    question_type: QuestionType
    options: Optional[List[str]] = Field(default=None, description="Choices for MCQ questions.")
    correct_answer: Optional[str] = Field(default=None, description="Required for MCQ and TrueFalse questions.")
    points: float = Field(default=1, ge=0)

    @model_validator(mode="after")
    def objective_questions_need_an_answer(self):
        if self.question_type in AUTO_GRADED_TYPES and not self.correct_answer:
            raise ValueError(f"{self.question_type.value} questions require a correct_answer.")
        return self

class StudentExamQuestion(BaseModel):
    """A question as shown to a student taking the exam: no correct answer."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    question_text: str
    question_type: QuestionType
    options: List[str] = Field(default_factory=list)
    points: float
    order: int

class ExamQuestion(StudentExamQuestion):
    correct_answer: Optional[str] = None

# --- Exams ---

class ExamCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    classroom_id: str
    start_time: datetime
    end_time: datetime
    duration_minutes: int = Field(..., gt=0)
    total_marks: float = Field(..., ge=0)
    questions: List[ExamQuestionCreate] = Field(default_factory=list)

    @model_validator(mode="after")
    def end_not_before_start(self):
        if self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time.")
        return self

class Exam(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    classroom_id: str
    classroom_name: Optional[str] = None
    start_time: datetime
    end_time: datetime
    duration_minutes: int
    total_marks: float
    status: ExamStatus
    window: ExamWindow
    question_count: int = 0
    submission_count: int = 0

class ExamDetail(Exam):
    questions: List[ExamQuestion]

class StudentExamDetail(Exam):
    questions: List[StudentExamQuestion]

# --- Submissions ---

class ExamSubmissionCreate(BaseModel):
    answers: Dict[str, str] = Field(..., description="Raw answers keyed by question id.")

class ExamSubmission(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    exam_id: str
    student_id: str
    answers: Dict[str, str]
    score: float = Field(..., description="The preliminary score for objective questions only.")
    submitted_at: datetime
