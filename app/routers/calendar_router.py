# /app/routers/calendar_router.py

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..core.deps import get_current_context
from ..models.calendar_model import CalendarEvent
from ..models.user_model import CurrentContext
from ..services import calendar_service
from ..services.database_service import DatabaseServiceFactory, get_db_service_factory

router = APIRouter()


@router.get("/events", response_model=List[CalendarEvent], summary="Get Exams, Live Sessions and Homework as Calendar Events")
async def get_calendar_events(
    day: Optional[date] = Query(default=None, description="Only return events on this (UTC) day."),
    ctx: CurrentContext = Depends(get_current_context),
    db_factory: DatabaseServiceFactory = Depends(get_db_service_factory)
):
    return await calendar_service.get_events(ctx=ctx, db_factory=db_factory, day=day)
