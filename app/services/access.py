# /app/services/access.py

"""
Small helpers that turn a `CurrentContext` into the scope a query needs.
Staff see everything in their tenant; a student only sees what belongs to
the classrooms they are enrolled in.
"""

from typing import List, Optional

from ..core.exceptions import NotFoundError, PermissionDeniedError
from ..models.user_model import CurrentContext
from .database_service import DatabaseService


def require_student_profile(ctx: CurrentContext) -> str:
    """Returns the caller's StudentProfile id, or raises if the caller is not a student."""
    if not ctx.is_student:
        raise PermissionDeniedError("Only students can perform this action.")
    if not ctx.student_profile_id:
        raise NotFoundError("Student profile not found.")
    return ctx.student_profile_id


def visible_classroom_ids(ctx: CurrentContext, db: DatabaseService) -> Optional[List[str]]:
    """
    None means "no classroom filter" (staff). For students, the list of their
    enrolled classrooms, which may be empty.
    """
    if not ctx.is_student:
        return None
    if not ctx.student_profile_id:
        return []
    return db.get_classroom_ids_for_student(student_id=ctx.student_profile_id, tenant_id=ctx.tenant_id)


def ensure_classroom_visible(classroom_id: str, ctx: CurrentContext, db: DatabaseService) -> None:
    """Raises NotFoundError when a student asks about a classroom they are not enrolled in."""
    allowed = visible_classroom_ids(ctx, db)
    if allowed is not None and classroom_id not in allowed:
        raise NotFoundError("This item is not available to you.")
