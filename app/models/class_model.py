# /app/models/class_model.py

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional


class ClassroomCreate(BaseModel):
    name: str = Field(..., min_length=1)
    level: str
    grade: str


class Classroom(ClassroomCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str
    teacher_id: Optional[str] = None
    tenant_id: str


class ClassroomSummary(Classroom):
    """A classroom annotated with how many students are enrolled in it."""
    enrollment_count: int = Field(default=0)


class EnrollmentRequest(BaseModel):
    student_id: str = Field(..., description="The StudentProfile id to enroll.")
