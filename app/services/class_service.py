# /app/services/class_service.py

"""
This service module is the business logic layer for classrooms and their
enrollments.

Every function takes the caller's `CurrentContext` so that all operations
are scoped to the caller's tenant. It is the link between the classes router
and the data access layer.
"""

import logging
import pandas as pd
from typing import List

from ..core.exceptions import NotFoundError
from ..models import class_model
from ..models.student_model import StudentWithUser
from ..models.user_model import CurrentContext
from .database_service import DatabaseService
from .database_helpers import mappers
from .database_helpers.sql_base import new_id

logger = logging.getLogger(__name__)

ROSTER_COLUMNS = ['Student Name', 'Student Code', 'Grade', 'Level', 'Classroom']


def _get_classroom_or_raise(classroom_id: str, ctx: CurrentContext, db: DatabaseService):
    classroom = db.get_classroom_by_id(classroom_id=classroom_id, tenant_id=ctx.tenant_id)
    if classroom is None:
        raise NotFoundError(f"Classroom with ID {classroom_id} not found.")
    return classroom


# --- Classroom CRUD ---

def create_classroom(classroom_data: class_model.ClassroomCreate, ctx: CurrentContext, db: DatabaseService) -> class_model.Classroom:
    """
    Creates a classroom in the caller's tenant. The creating teacher is
    stamped as the classroom's teacher.
    """
    record = {
        "id": new_id("cls"),
        "teacher_id": ctx.user_id,
        "tenant_id": ctx.tenant_id,
        **classroom_data.model_dump(),
    }
    return mappers.to_classroom(db.add_classroom(record))


def get_classroom(classroom_id: str, ctx: CurrentContext, db: DatabaseService) -> class_model.Classroom:
    return mappers.to_classroom(_get_classroom_or_raise(classroom_id, ctx, db))


def get_all_classrooms_with_summary(ctx: CurrentContext, db: DatabaseService) -> List[class_model.ClassroomSummary]:
    """
    Retrieves all classrooms of the tenant, each enriched with its number of
    enrolled students.
    """
    all_classrooms = db.get_all_classrooms(tenant_id=ctx.tenant_id)
    if not all_classrooms:
        return []

    enrollments_df = pd.DataFrame(db.get_enrollment_rows(tenant_id=ctx.tenant_id))

    enrollment_counts = {}
    if not enrollments_df.empty and 'classroom_id' in enrollments_df.columns:
        enrollment_counts = enrollments_df.groupby('classroom_id').size().to_dict()

    return [
        mappers.to_classroom_summary(row, int(enrollment_counts.get(row.id, 0)))
        for row in all_classrooms
    ]


# --- Enrollment ---

def get_enrolled_students(classroom_id: str, ctx: CurrentContext, db: DatabaseService) -> List[StudentWithUser]:
    _get_classroom_or_raise(classroom_id, ctx, db)
    rows = db.get_enrolled_students(classroom_id=classroom_id, tenant_id=ctx.tenant_id)
    return [mappers.to_student(row) for row in rows]


def enroll_student(classroom_id: str, student_id: str, ctx: CurrentContext, db: DatabaseService) -> bool:
    """
    Enrolls a student in a classroom. Enrolling an already-enrolled student
    is a successful no-op; the return value tells whether a row was created.
    """
    _get_classroom_or_raise(classroom_id, ctx, db)
    if db.get_student_by_id(student_id=student_id, tenant_id=ctx.tenant_id) is None:
        raise NotFoundError(f"Student with ID {student_id} not found.")

    created = db.add_enrollment({
        "id": new_id("enr"),
        "classroom_id": classroom_id,
        "student_id": student_id,
        "tenant_id": ctx.tenant_id,
    })
    if created:
        logger.info("Enrolled student %s in classroom %s.", student_id, classroom_id)
    return created


def remove_student(classroom_id: str, student_id: str, ctx: CurrentContext, db: DatabaseService) -> bool:
    return db.delete_enrollment(classroom_id=classroom_id, student_id=student_id, tenant_id=ctx.tenant_id)


# --- Export ---

def export_roster_as_csv(classroom_id: str, ctx: CurrentContext, db: DatabaseService) -> str:
    """Generates a CSV export of one classroom's roster."""
    classroom = _get_classroom_or_raise(classroom_id, ctx, db)
    students = db.get_enrolled_students(classroom_id=classroom_id, tenant_id=ctx.tenant_id)

    export_data = [
        {
            'Student Name': s.user.name if s.user else "N/A",
            'Student Code': s.student_code,
            'Grade': s.grade,
            'Level': s.level,
            'Classroom': classroom.name,
        } for s in students
    ]

    df = pd.DataFrame(export_data) if export_data else pd.DataFrame(columns=ROSTER_COLUMNS)
    return df.to_csv(index=False)
