# /app/services/database_helpers/class_student_repository_sql.py

"""
This module contains all the raw SQLAlchemy queries for the StudentProfile,
Classroom and Enrollment tables. It is the direct interface to the database
for all roster data and the final point of enforcement for tenant isolation.

Every method that reads or modifies tenant-owned data requires a
`tenant_id`, so a caller can never reach another tenant's rows.
"""

import logging
import uuid
from typing import List, Dict, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

# Import the SQLAlchemy models this repository will interact with.
from app.db.models.class_student_models import StudentProfile, Classroom, Enrollment
from app.db.models.user_models import User
from app.core.exceptions import UpstreamFailureError, ValidationError
from .sql_base import translate_store_errors

logger = logging.getLogger(__name__)

# How many times provisioning retries when a generated code is already taken.
_CODE_ATTEMPTS = 5


def _generate_student_code() -> str:
    return f"STU-{uuid.uuid4().hex[:8].upper()}"


@translate_store_errors
class ClassStudentRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Student Methods ---

    def get_all_students(self, tenant_id: str) -> List[StudentProfile]:
        """Retrieves every student profile of the tenant with its user eagerly loaded."""
        return (
            self.db.query(StudentProfile)
            .options(joinedload(StudentProfile.user))
            .filter(StudentProfile.tenant_id == tenant_id)
            .all()
        )

    def get_student_by_id(self, student_id: str, tenant_id: str) -> Optional[StudentProfile]:
        return (
            self.db.query(StudentProfile)
            .options(joinedload(StudentProfile.user))
            .filter(StudentProfile.id == student_id, StudentProfile.tenant_id == tenant_id)
            .first()
        )

    def get_student_by_code(self, student_code: str, tenant_id: str) -> Optional[StudentProfile]:
        """
        Looks a student up by their human-readable code. Codes are unique
        system-wide, but a code from another tenant is treated as unknown.
        """
        return (
            self.db.query(StudentProfile)
            .options(joinedload(StudentProfile.user))
            .filter(StudentProfile.student_code == student_code, StudentProfile.tenant_id == tenant_id)
            .first()
        )

    def count_students(self, tenant_id: str) -> int:
        return self.db.query(func.count(StudentProfile.id)).filter(StudentProfile.tenant_id == tenant_id).scalar() or 0

    def provision_student(self, user_record: Dict, profile_record: Dict) -> StudentProfile:
        """
        Creates the student's user and profile in one transaction.

        The profile's `student_code` is generated here and regenerated on a
        collision. A username taken between the service's check and the
        commit raises `ValidationError`.
        """
        for attempt in range(1, _CODE_ATTEMPTS + 1):
            code = _generate_student_code()
            if self.db.query(StudentProfile.id).filter(StudentProfile.student_code == code).first():
                logger.warning("Generated student code %s already taken (attempt %d).", code, attempt)
                continue
            user = User(**user_record)
            profile = StudentProfile(**profile_record, student_code=code)
            self.db.add(user)
            self.db.add(profile)
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                if self.db.query(User.id).filter(User.username == user_record["username"]).first():
                    raise ValidationError(f"The username '{user_record['username']}' is already taken.")
                logger.warning("Student code %s taken concurrently (attempt %d).", code, attempt)
                continue
            self.db.refresh(profile)
            return profile
        raise UpstreamFailureError("Could not generate a unique student code.")

    # --- Classroom Methods ---

    def get_all_classrooms(self, tenant_id: str) -> List[Classroom]:
        return self.db.query(Classroom).filter(Classroom.tenant_id == tenant_id).order_by(Classroom.name).all()

    def get_classroom_by_id(self, classroom_id: str, tenant_id: str) -> Optional[Classroom]:
        return (
            self.db.query(Classroom)
            .filter(Classroom.id == classroom_id, Classroom.tenant_id == tenant_id)
            .first()
        )

    def add_classroom(self, record: Dict) -> Classroom:
        """
        Creates a new Classroom record.
        This function expects the `tenant_id` to be present in the `record` dictionary.
        """
        new_classroom = Classroom(**record)
        self.db.add(new_classroom)
        self.db.commit()
        self.db.refresh(new_classroom)
        return new_classroom

    def count_classrooms(self, tenant_id: str) -> int:
        return self.db.query(func.count(Classroom.id)).filter(Classroom.tenant_id == tenant_id).scalar() or 0

    def get_classroom_ids_for_student(self, student_id: str, tenant_id: str) -> List[str]:
        rows = (
            self.db.query(Enrollment.classroom_id)
            .filter(Enrollment.student_id == student_id, Enrollment.tenant_id == tenant_id)
            .all()
        )
        return [row[0] for row in rows]

    # --- Enrollment Methods ---

    def get_enrollment_rows(self, tenant_id: str) -> List[Dict]:
        """Returns one plain dict per enrollment of the tenant, for aggregation."""
        rows = (
            self.db.query(Enrollment.classroom_id, Enrollment.student_id)
            .filter(Enrollment.tenant_id == tenant_id)
            .all()
        )
        return [{"classroom_id": r.classroom_id, "student_id": r.student_id} for r in rows]

    def get_enrolled_students(self, classroom_id: str, tenant_id: str) -> List[StudentProfile]:
        """
        Retrieves the students of a classroom, but only if the classroom
        belongs to the tenant.
        """
        if not self.get_classroom_by_id(classroom_id=classroom_id, tenant_id=tenant_id):
            return []
        return (
            self.db.query(StudentProfile)
            .join(Enrollment, Enrollment.student_id == StudentProfile.id)
            .options(joinedload(StudentProfile.user))
            .filter(Enrollment.classroom_id == classroom_id)
            .all()
        )

    def is_enrolled(self, classroom_id: str, student_id: str) -> bool:
        return (
            self.db.query(Enrollment.id)
            .filter(Enrollment.classroom_id == classroom_id, Enrollment.student_id == student_id)
            .first()
            is not None
        )

    def add_enrollment(self, record: Dict) -> bool:
        """
        Inserts an enrollment. Returns False when the pair already existed;
        that duplicate-key signal is a benign no-op, not an error.
        """
        self.db.add(Enrollment(**record))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info(
                "Student %s already enrolled in classroom %s; ignoring.",
                record.get("student_id"), record.get("classroom_id")
            )
            return False
        return True

    def delete_enrollment(self, classroom_id: str, student_id: str, tenant_id: str) -> bool:
        deleted = (
            self.db.query(Enrollment)
            .filter(
                Enrollment.classroom_id == classroom_id,
                Enrollment.student_id == student_id,
                Enrollment.tenant_id == tenant_id,
            )
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted > 0
