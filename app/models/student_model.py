# /app/models/student_model.py

# --- Core Imports ---
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import date

from .user_model import User

# --- Model Definitions ---

class StudentCreate(BaseModel):
    """
    The payload a teacher submits to provision a new student. The student's
    user account and profile (with a freshly generated code) are created
    together in one transaction.
    """
    name: str = Field(..., min_length=2, description="The full name of the student.")
    username: str = Field(..., min_length=3, description="The login name the student will use.")
    grade: str = Field(..., description="The student's grade, e.g. 'Grade 7'.")
    level: str = Field(..., description="The academic level, e.g. 'Middle School'.")
    date_of_birth: Optional[date] = Field(default=None)


class StudentProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    student_code: str = Field(..., description="The globally unique, human-readable student code.")
    grade: str
    level: str
    tenant_id: str


class StudentWithUser(StudentProfile):
    """A student profile joined with its owning user record."""
    user: User


class ProvisionedStudent(StudentWithUser):
    """Returned once, when the account is created. The password is not stored in clear anywhere."""
    initial_password: str = Field(..., description="The generated password the student signs in with.")
