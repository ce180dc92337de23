# /app/services/video_service.py

from datetime import datetime
from typing import List, Optional

from ..core.exceptions import NotFoundError
from ..models import video_model
from ..models.user_model import CurrentContext
from .access import require_student_profile, visible_classroom_ids, ensure_classroom_visible
from .database_service import DatabaseService
from .database_helpers import mappers
from .database_helpers.sql_base import new_id
from .exam_helpers.lifecycle import as_utc, utc_now


def get_videos(ctx: CurrentContext, db: DatabaseService) -> List[video_model.VideoLesson]:
    rows = db.get_videos(tenant_id=ctx.tenant_id, classroom_ids=visible_classroom_ids(ctx, db))
    return [mappers.to_video_lesson(row) for row in rows]


def create_video(video_data: video_model.VideoLessonCreate, ctx: CurrentContext, db: DatabaseService) -> video_model.VideoLesson:
    if db.get_classroom_by_id(classroom_id=video_data.classroom_id, tenant_id=ctx.tenant_id) is None:
        raise NotFoundError(f"Classroom with ID {video_data.classroom_id} not found.")
    record = {
        "id": new_id("vid"),
        "title": video_data.title,
        "description": video_data.description,
        "classroom_id": video_data.classroom_id,
        "video_url": video_data.video_url,
        "provider_type": video_data.provider_type.value,
        "tenant_id": ctx.tenant_id,
    }
    return mappers.to_video_lesson(db.add_video(record))


def update_progress(
    video_id: str,
    progress: video_model.ViewProgressUpdate,
    ctx: CurrentContext,
    db: DatabaseService,
    now: Optional[datetime] = None
) -> video_model.ViewProgress:
    """Upserts the student's watch position. The latest report wins, even if it is lower."""
    student_id = require_student_profile(ctx)
    video = db.get_video(video_id=video_id, tenant_id=ctx.tenant_id)
    if video is None:
        raise NotFoundError(f"Video with ID {video_id} not found.")
    ensure_classroom_visible(video.classroom_id, ctx, db)

    row = db.upsert_video_view(
        video_id=video_id,
        student_id=student_id,
        tenant_id=ctx.tenant_id,
        watch_seconds=progress.seconds_watched,
        updated_at=as_utc(now or utc_now()),
    )
    return mappers.to_view_progress(row)
