# /app/routers/videos_router.py

from fastapi import APIRouter, Depends, status
from typing import List

from ..core.deps import get_current_context, require_staff, require_student
from ..models import video_model
from ..models.user_model import CurrentContext
from ..services import video_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()


@router.get("", response_model=List[video_model.VideoLesson], summary="List Video Lessons")
def get_videos(ctx: CurrentContext = Depends(get_current_context), db: DatabaseService = Depends(get_db_service)):
    return video_service.get_videos(ctx=ctx, db=db)


@router.post("", response_model=video_model.VideoLesson, status_code=status.HTTP_201_CREATED, summary="Add a Video Lesson")
def create_video(video_create: video_model.VideoLessonCreate, ctx: CurrentContext = Depends(require_staff), db: DatabaseService = Depends(get_db_service)):
    return video_service.create_video(video_data=video_create, ctx=ctx, db=db)


@router.put("/{video_id}/progress", response_model=video_model.ViewProgress, summary="Report Watch Progress")
def update_progress(video_id: str, progress: video_model.ViewProgressUpdate, ctx: CurrentContext = Depends(require_student), db: DatabaseService = Depends(get_db_service)):
    return video_service.update_progress(video_id=video_id, progress=progress, ctx=ctx, db=db)
