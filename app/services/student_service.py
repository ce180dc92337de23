# /app/services/student_service.py

import logging
import secrets
from typing import List

from ..core import security
from ..core.exceptions import NotFoundError, ValidationError
from ..models.student_model import ProvisionedStudent, StudentCreate, StudentWithUser
from ..models.user_model import CurrentContext, UserRole
from .database_service import DatabaseService
from .database_helpers import mappers
from .database_helpers.sql_base import new_id

logger = logging.getLogger(__name__)

# Entropy of the generated initial password, in bytes.
INITIAL_PASSWORD_BYTES = 12


def get_students(ctx: CurrentContext, db: DatabaseService) -> List[StudentWithUser]:
    return [mappers.to_student(row) for row in db.get_all_students(tenant_id=ctx.tenant_id)]


def get_student_by_code(code: str, ctx: CurrentContext, db: DatabaseService) -> StudentWithUser:
    """The quick-view lookup. Surrounding whitespace in the scanned code is ignored."""
    row = db.get_student_by_code(student_code=code.strip(), tenant_id=ctx.tenant_id)
    if row is None:
        raise NotFoundError(f"No student with code '{code.strip()}'.")
    return mappers.to_student(row)


def provision_student(student_data: StudentCreate, ctx: CurrentContext, db: DatabaseService) -> ProvisionedStudent:
    """
    Creates a student's user account and profile in the caller's tenant.

    The student signs in with their username and a randomly generated
    password, which is handed back in this response only.
    """
    if db.get_user_by_login(student_data.username):
        raise ValidationError(f"The username '{student_data.username}' is already taken.")

    initial_password = secrets.token_urlsafe(INITIAL_PASSWORD_BYTES)
    user_id = new_id("usr")
    user_record = {
        "id": user_id,
        "username": student_data.username,
        "name": student_data.name,
        "role": UserRole.STUDENT.value,
        "hashed_password": security.get_password_hash(initial_password),
        "tenant_id": ctx.tenant_id,
    }
    profile_record = {
        "id": new_id("stu"),
        "user_id": user_id,
        "grade": student_data.grade,
        "level": student_data.level,
        "date_of_birth": student_data.date_of_birth,
        "tenant_id": ctx.tenant_id,
    }
    profile = db.provision_student(user_record, profile_record)
    logger.info("Provisioned student %s with code %s.", profile.id, profile.student_code)
    return ProvisionedStudent(**mappers.to_student(profile).model_dump(), initial_password=initial_password)
