# /app/services/dashboard_service.py

"""
Calculates the role-specific dashboard summary.

Each count is an independent branch: it opens its own database session, runs
in a worker thread, and all branches are awaited together. A branch that
fails is logged and reported as 0; the other counts are unaffected and the
summary as a whole still succeeds.

    Teacher / Admin / Supervisor -> students, classrooms, exams, liveSessions
    Student                      -> classrooms, exams, homework, liveSessions
    Parent                       -> nothing (all zeros)

`liveSessions` counts sessions that have not started yet.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Dict, Optional

from ..models.dashboard_model import DashboardSummary
from ..models.user_model import CurrentContext
from .database_service import DatabaseService, DatabaseServiceFactory
from .exam_helpers.lifecycle import utc_now

logger = logging.getLogger(__name__)

Metric = Callable[[DatabaseService], int]


def _enrolled_classroom_ids(ctx: CurrentContext, db: DatabaseService):
    if not ctx.student_profile_id:
        return []
    return db.get_classroom_ids_for_student(student_id=ctx.student_profile_id, tenant_id=ctx.tenant_id)


def _staff_metrics(ctx: CurrentContext, now: datetime) -> Dict[str, Metric]:
    tenant_id = ctx.tenant_id
    return {
        "students": lambda db: db.count_students(tenant_id),
        "classrooms": lambda db: db.count_classrooms(tenant_id),
        "exams": lambda db: db.count_exams(tenant_id),
        "liveSessions": lambda db: db.count_live_sessions_starting_after(tenant_id, now),
    }


def _student_metrics(ctx: CurrentContext, now: datetime) -> Dict[str, Metric]:
    tenant_id = ctx.tenant_id
    return {
        "classrooms": lambda db: len(_enrolled_classroom_ids(ctx, db)),
        "exams": lambda db: db.count_exams(tenant_id, _enrolled_classroom_ids(ctx, db)),
        "homework": lambda db: db.count_homeworks(tenant_id, _enrolled_classroom_ids(ctx, db)),
        "liveSessions": lambda db: db.count_live_sessions_starting_after(tenant_id, now, _enrolled_classroom_ids(ctx, db)),
    }


def metrics_for(ctx: CurrentContext, now: datetime) -> Dict[str, Metric]:
    if ctx.is_staff:
        return _staff_metrics(ctx, now)
    if ctx.is_student:
        return _student_metrics(ctx, now)
    return {}


def _run_metric(metric: Metric, db_factory: DatabaseServiceFactory) -> int:
    db = db_factory()
    try:
        return int(metric(db))
    finally:
        db.close()


async def get_summary_data(
    ctx: CurrentContext,
    db_factory: DatabaseServiceFactory,
    now: Optional[datetime] = None
) -> DashboardSummary:
    """
    Args:
        ctx: The caller; decides which counts are computed.
        db_factory: Opens a fresh DatabaseService for every branch.
        now: The instant that separates upcoming live sessions from the rest.

    Returns:
        A DashboardSummary; metrics not computed for the role, or whose
        branch failed, are 0.
    """
    metrics = metrics_for(ctx, now or utc_now())
    if not metrics:
        return DashboardSummary()

    names = list(metrics)
    results = await asyncio.gather(
        *(asyncio.to_thread(_run_metric, metrics[name], db_factory) for name in names),
        return_exceptions=True,
    )

    counts = {}
    for name, result in zip(names, results):
        if isinstance(result, Exception):
            logger.warning("Dashboard metric '%s' failed for tenant %s; reporting 0. Error: %s", name, ctx.tenant_id, result)
            counts[name] = 0
        else:
            counts[name] = result
    return DashboardSummary(**counts)
