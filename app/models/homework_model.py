# /app/models/homework_model.py

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime
from enum import Enum


class HomeworkState(str, Enum):
    """The workflow state of one (homework, student) pair."""
    PENDING = "pending"
    OVERDUE = "overdue"
    SUBMITTED = "submitted"
    GRADED = "graded"


class HomeworkCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    classroom_id: str
    due_date: datetime


class Homework(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    classroom_id: str
    classroom_name: Optional[str] = None
    due_date: datetime
    created_at: Optional[datetime] = None


class HomeworkSubmissionCreate(BaseModel):
    content: str = Field(..., min_length=1)


class HomeworkSubmission(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    homework_id: str
    student_id: str
    content: str
    grade: Optional[float] = None
    feedback: Optional[str] = None
    submitted_at: datetime
    # Filled in on the teacher's listing only.
    student_name: Optional[str] = None
    student_code: Optional[str] = None


class StudentHomework(Homework):
    """A homework as seen by one student: at most their own submission, plus its state."""
    submission: Optional[HomeworkSubmission] = None
    state: HomeworkState


class GradeRequest(BaseModel):
    # The 0-10 range is enforced by the homework service so that an
    # out-of-range grade surfaces as an InvalidGradeError.
    grade: float
    feedback: Optional[str] = None
