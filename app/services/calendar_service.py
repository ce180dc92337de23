# /app/services/calendar_service.py

"""
Builds the unified calendar: exams and live sessions at their start time,
homework at its due date. The three sources are read concurrently, each on
its own session; a source that fails contributes no events instead of
failing the calendar.
"""

import asyncio
import logging
from datetime import date
from typing import Callable, Dict, List, Optional

from ..models.calendar_model import CalendarEvent, CalendarEventType
from ..models.user_model import CurrentContext
from .access import visible_classroom_ids
from .database_service import DatabaseService, DatabaseServiceFactory
from .exam_helpers.lifecycle import as_utc

logger = logging.getLogger(__name__)

Source = Callable[[DatabaseService], List[CalendarEvent]]


def _exam_events(ctx: CurrentContext, db: DatabaseService) -> List[CalendarEvent]:
    rows = db.get_exams(tenant_id=ctx.tenant_id, classroom_ids=visible_classroom_ids(ctx, db))
    return [CalendarEvent(id=r.id, title=r.title, date=as_utc(r.start_time), type=CalendarEventType.EXAM) for r in rows]


def _live_events(ctx: CurrentContext, db: DatabaseService) -> List[CalendarEvent]:
    rows = db.get_live_sessions(tenant_id=ctx.tenant_id, classroom_ids=visible_classroom_ids(ctx, db))
    return [CalendarEvent(id=r.id, title=r.title, date=as_utc(r.start_time), type=CalendarEventType.LIVE) for r in rows]


def _homework_events(ctx: CurrentContext, db: DatabaseService) -> List[CalendarEvent]:
    rows = db.get_homeworks(tenant_id=ctx.tenant_id, classroom_ids=visible_classroom_ids(ctx, db))
    return [CalendarEvent(id=r.id, title=r.title, date=as_utc(r.due_date), type=CalendarEventType.HOMEWORK) for r in rows]


def _sources(ctx: CurrentContext) -> Dict[str, Source]:
    return {
        "exams": lambda db: _exam_events(ctx, db),
        "live sessions": lambda db: _live_events(ctx, db),
        "homework": lambda db: _homework_events(ctx, db),
    }


def _run_source(source: Source, db_factory: DatabaseServiceFactory) -> List[CalendarEvent]:
    db = db_factory()
    try:
        return source(db)
    finally:
        db.close()


async def get_events(
    ctx: CurrentContext,
    db_factory: DatabaseServiceFactory,
    day: Optional[date] = None
) -> List[CalendarEvent]:
    """All dated events visible to the caller in chronological order, optionally limited to one (UTC) day."""
    sources = _sources(ctx)
    names = list(sources)
    results = await asyncio.gather(
        *(asyncio.to_thread(_run_source, sources[name], db_factory) for name in names),
        return_exceptions=True,
    )

    events: List[CalendarEvent] = []
    for name, result in zip(names, results):
        if isinstance(result, Exception):
            logger.warning("Calendar source '%s' failed for tenant %s; skipping it. Error: %s", name, ctx.tenant_id, result)
            continue
        events.extend(result)

    if day is not None:
        events = [e for e in events if e.date.date() == day]
    return sorted(events, key=lambda e: (e.date, e.id))
