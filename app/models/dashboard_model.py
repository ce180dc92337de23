# /app/models/dashboard_model.py

# --- Core Imports ---
from pydantic import BaseModel, Field

# --- Model Definition ---

class DashboardSummary(BaseModel):
    """
    Defines the data contract for the dashboard summary endpoint.

    Every count is computed independently. A count whose query failed is
    reported as 0 rather than failing the whole summary, so a zero here does
    not guarantee the underlying table is empty.
    """

    students: int = Field(
        default=0,
        description="Total students of the tenant (staff roles only).",
        examples=[112]
    )

    classrooms: int = Field(
        default=0,
        description="Classrooms of the tenant, or the student's enrolled classrooms.",
        examples=[4]
    )

    exams: int = Field(
        default=0,
        description="Exams visible to the caller.",
        examples=[9]
    )

    homework: int = Field(
        default=0,
        description="Homework assignments visible to the caller (students only).",
        examples=[6]
    )

    liveSessions: int = Field(
        default=0,
        description="Live sessions that have not started yet.",
        examples=[2]
    )
