# /app/services/database_helpers/user_repository_sql.py

"""
Raw SQLAlchemy queries for the Tenant and User tables. These back the
authentication flow: sign-up, sign-in and resolving the current identity.
"""

from typing import Dict, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.db.models.user_models import Tenant, User
from app.db.models.class_student_models import StudentProfile
from .sql_base import translate_store_errors


@translate_store_errors
class UserRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_user_by_login(self, login: str) -> Optional[User]:
        """Teachers sign in with their email, provisioned students with their username."""
        return self.db.query(User).filter(or_(User.email == login, User.username == login)).first()

    def get_student_profile_id(self, user_id: str) -> Optional[str]:
        row = self.db.query(StudentProfile.id).filter(StudentProfile.user_id == user_id).first()
        return row[0] if row else None

    def add_tenant_with_owner(self, tenant_record: Dict, user_record: Dict) -> User:
        """
        Creates a tenant and its first user in a single transaction, so a
        failed user insert never leaves an orphan tenant behind.
        """
        tenant = Tenant(**tenant_record)
        user = User(**user_record)
        self.db.add(tenant)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
