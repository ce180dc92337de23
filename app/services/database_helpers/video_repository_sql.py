# /app/services/database_helpers/video_repository_sql.py

from datetime import datetime
from typing import List, Dict, Optional, Iterable
from sqlalchemy.orm import Session, joinedload

from app.db.models.video_models import VideoLesson, VideoView
from .sql_base import translate_store_errors, new_id


@translate_store_errors
class VideoRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_videos(self, tenant_id: str, classroom_ids: Optional[Iterable[str]] = None) -> List[VideoLesson]:
        """Retrieves video lessons, newest first."""
        query = (
            self.db.query(VideoLesson)
            .options(joinedload(VideoLesson.classroom))
            .filter(VideoLesson.tenant_id == tenant_id)
        )
        if classroom_ids is not None:
            query = query.filter(VideoLesson.classroom_id.in_(list(classroom_ids)))
        return query.order_by(VideoLesson.created_at.desc(), VideoLesson.id).all()

    def get_video(self, video_id: str, tenant_id: str) -> Optional[VideoLesson]:
        return (
            self.db.query(VideoLesson)
            .filter(VideoLesson.id == video_id, VideoLesson.tenant_id == tenant_id)
            .first()
        )

    def add_video(self, record: Dict) -> VideoLesson:
        new_video = VideoLesson(**record)
        self.db.add(new_video)
        self.db.commit()
        self.db.refresh(new_video)
        return new_video

    def upsert_view(
        self, video_id: str, student_id: str, tenant_id: str, watch_seconds: int, updated_at: datetime
    ) -> VideoView:
        """Creates or overwrites the (video, student) progress row."""
        view = (
            self.db.query(VideoView)
            .filter(VideoView.video_lesson_id == video_id, VideoView.student_id == student_id)
            .first()
        )
        if view is None:
            view = VideoView(
                id=new_id("view"),
                video_lesson_id=video_id,
                student_id=student_id,
                tenant_id=tenant_id,
            )
            self.db.add(view)
        view.watch_seconds = watch_seconds
        view.last_updated = updated_at
        self.db.commit()
        self.db.refresh(view)
        return view
