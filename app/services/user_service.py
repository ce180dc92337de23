# /app/services/user_service.py

"""
Business logic for sign-up and sign-in.

Registering creates a brand-new tenant and makes the registering person its
first Teacher. Students never register themselves; they are provisioned by a
teacher through `student_service.provision_student`.
"""

import logging
from typing import Optional

from ..core import security
from ..core.exceptions import ValidationError
from ..db.models.user_models import User as UserModel
from ..models.user_model import UserCreate, UserRole
from .database_service import DatabaseService
from .database_helpers.sql_base import new_id

logger = logging.getLogger(__name__)


def create_user(db: DatabaseService, user: UserCreate) -> UserModel:
    """Signs a new teacher up. Raises ValidationError if the email is already registered."""
    if db.get_user_by_email(user.email):
        raise ValidationError("A user with this email already exists.")

    tenant_id = new_id("ten")
    tenant_record = {"id": tenant_id, "name": user.tenant_name, "type": user.tenant_type.value}
    user_record = {
        "id": new_id("usr"),
        "email": user.email,
        "name": user.name,
        "role": UserRole.TEACHER.value,
        "hashed_password": security.get_password_hash(user.password),
        "tenant_id": tenant_id,
    }
    new_user = db.add_tenant_with_owner(tenant_record, user_record)
    logger.info("Registered teacher %s for new tenant %s.", new_user.id, tenant_id)
    return new_user


def authenticate_user(db: DatabaseService, login: str, password: str) -> Optional[UserModel]:
    """Returns the user when the login (email or username) and password match, else None."""
    user = db.get_user_by_login(login)
    if not user or not user.hashed_password:
        return None
    if not security.verify_password(password, user.hashed_password):
        return None
    return user
