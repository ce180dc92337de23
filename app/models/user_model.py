# /app/models/user_model.py

from pydantic import BaseModel, Field, ConfigDict, EmailStr
from typing import Optional
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    TEACHER = "Teacher"
    STUDENT = "Student"
    PARENT = "Parent"
    SUPERVISOR = "Supervisor"
    ADMIN = "Admin"


class TenantType(str, Enum):
    INDIVIDUAL = "individual"
    CENTER = "center"
    SCHOOL = "school"


class Tenant(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: TenantType
    logo_url: Optional[str] = None


class User(BaseModel):
    """The public representation of an authenticated identity. Never carries the password hash."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: Optional[str] = None
    username: Optional[str] = None
    name: str
    role: UserRole
    tenant_id: str
    created_at: Optional[datetime] = None


class UserCreate(BaseModel):
    """
    The sign-up payload. Registering always creates a new tenant and makes the
    registering user its first Teacher.
    """
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=2)
    tenant_name: str = Field(..., min_length=1, description="The name of the school, center or individual practice.")
    tenant_type: TenantType = Field(default=TenantType.INDIVIDUAL)


class Token(BaseModel):
    access_token: str
    token_type: str


class CurrentContext(BaseModel):
    """
    The caller's identity, resolved once per request and handed explicitly to
    every service function that needs to know who is asking.
    `student_profile_id` is only set for users with the Student role.
    """
    model_config = ConfigDict(frozen=True)

    user_id: str
    tenant_id: str
    role: UserRole
    student_profile_id: Optional[str] = None

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.STUDENT

    @property
    def is_staff(self) -> bool:
        return self.role in (UserRole.TEACHER, UserRole.ADMIN, UserRole.SUPERVISOR)
