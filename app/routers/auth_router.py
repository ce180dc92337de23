# /app/routers/auth_router.py

"""
This module defines the public-facing API for authentication:

- registration of a new teacher and tenant (`/register`)
- login and token generation (`/token`)
- the current user's profile (`/me`)

Business-rule failures (e.g. an email that is already registered) are raised
by `user_service` as domain errors and translated centrally in `app.main`.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from app.db.models.user_models import User as UserModel
from app.models.user_model import User, UserCreate, Token
from app.services import user_service
from app.services.database_service import DatabaseService, get_db_service
from app.core import security
from app.core.deps import get_current_user

router = APIRouter()


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
def register_user(user_in: UserCreate, db: DatabaseService = Depends(get_db_service)):
    return user_service.create_user(db=db, user=user_in)


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: DatabaseService = Depends(get_db_service)
):
    """
    OAuth2 password flow. The `username` field accepts either the email of a
    staff account or the username of a provisioned student.
    """
    user = user_service.authenticate_user(db, login=form_data.username, password=form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect login or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Token(access_token=security.create_access_token(subject=user.id), token_type="bearer")


@router.get("/me", response_model=User)
def read_current_user(current_user: UserModel = Depends(get_current_user)):
    return current_user
