# /app/core/deps.py

"""
FastAPI dependencies that resolve who is calling.

The current user is looked up exactly once per request and condensed into a
`CurrentContext`, which routers then pass explicitly into the service layer.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from app.db.models.user_models import User as UserModel
from app.models.user_model import CurrentContext, UserRole
from app.services.database_service import DatabaseService, get_db_service
from . import security

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)


def resolve_user_from_token(token: str, db: DatabaseService) -> Optional[UserModel]:
    user_id = security.decode_access_token(token)
    if not user_id:
        return None
    return db.get_user_by_id(user_id)


def build_context(user: UserModel, db: DatabaseService) -> CurrentContext:
    role = UserRole(user.role)
    profile_id = db.get_student_profile_id(user.id) if role == UserRole.STUDENT else None
    return CurrentContext(user_id=user.id, tenant_id=user.tenant_id, role=role, student_profile_id=profile_id)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: DatabaseService = Depends(get_db_service)
) -> UserModel:
    user = resolve_user_from_token(token, db)
    if user is None:
        raise _CREDENTIALS_EXCEPTION
    return user


def get_current_context(
    user: UserModel = Depends(get_current_user),
    db: DatabaseService = Depends(get_db_service)
) -> CurrentContext:
    return build_context(user, db)


def require_roles(*roles: UserRole):
    """
    Builds a dependency that only lets the given roles through and hands the
    caller's context on to the endpoint.
    """
    def _checker(ctx: CurrentContext = Depends(get_current_context)) -> CurrentContext:
        if ctx.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"This action requires one of the roles: {', '.join(r.value for r in roles)}.",
            )
        return ctx
    return _checker


# Convenience guards used across the routers.
require_staff = require_roles(UserRole.TEACHER, UserRole.ADMIN, UserRole.SUPERVISOR)
require_student = require_roles(UserRole.STUDENT)
