# /app/routers/live_sessions_router.py

from fastapi import APIRouter, Depends, status
from typing import List

from ..core.deps import get_current_context, require_staff, require_student
from ..models import live_session_model
from ..models.user_model import CurrentContext
from ..services import live_session_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()


@router.get("", response_model=List[live_session_model.LiveSession], summary="List Live Sessions")
def get_sessions(ctx: CurrentContext = Depends(get_current_context), db: DatabaseService = Depends(get_db_service)):
    return live_session_service.get_sessions(ctx=ctx, db=db)


@router.post("", response_model=live_session_model.LiveSession, status_code=status.HTTP_201_CREATED, summary="Schedule a Live Session")
def create_session(session_create: live_session_model.LiveSessionCreate, ctx: CurrentContext = Depends(require_staff), db: DatabaseService = Depends(get_db_service)):
    return live_session_service.create_session(session_data=session_create, ctx=ctx, db=db)


@router.post("/{session_id}/join", response_model=live_session_model.JoinSessionResponse, summary="Join a Live Session")
def join_session(session_id: str, ctx: CurrentContext = Depends(require_student), db: DatabaseService = Depends(get_db_service)):
    return live_session_service.join_session(session_id=session_id, ctx=ctx, db=db)
