# /app/routers/classes_router.py

from fastapi import APIRouter, Depends, status, Response
from fastapi.responses import StreamingResponse
from typing import List

from ..core.deps import require_staff
from ..models import class_model, student_model
from ..models.user_model import CurrentContext
from ..services import class_service, database_service

router = APIRouter()

# --- CLASSROOM COLLECTION ENDPOINTS (/api/classes) ---

@router.get("", response_model=List[class_model.ClassroomSummary], summary="Get All Classrooms with Student Counts")
def get_all_classrooms(ctx: CurrentContext = Depends(require_staff), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    return class_service.get_all_classrooms_with_summary(ctx=ctx, db=db)

@router.post("", response_model=class_model.Classroom, status_code=status.HTTP_201_CREATED, summary="Create a Classroom")
def create_classroom(classroom_create: class_model.ClassroomCreate, ctx: CurrentContext = Depends(require_staff), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    return class_service.create_classroom(classroom_data=classroom_create, ctx=ctx, db=db)

# --- INDIVIDUAL CLASSROOM ENDPOINTS (/api/classes/{classroom_id}) ---

@router.get("/{classroom_id}", response_model=class_model.Classroom, summary="Get a Single Classroom")
def get_classroom(classroom_id: str, ctx: CurrentContext = Depends(require_staff), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    return class_service.get_classroom(classroom_id=classroom_id, ctx=ctx, db=db)

@router.get("/{classroom_id}/export", summary="Export Classroom Roster as CSV", response_class=StreamingResponse)
def export_classroom_roster_csv(classroom_id: str, ctx: CurrentContext = Depends(require_staff), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    classroom = class_service.get_classroom(classroom_id=classroom_id, ctx=ctx, db=db)
    csv_string = class_service.export_roster_as_csv(classroom_id=classroom_id, ctx=ctx, db=db)
    file_name = f"roster_{classroom.name.replace(' ', '_').lower()}.csv"
    return StreamingResponse(iter([csv_string]), media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={file_name}"})

# --- ENROLLMENT SUB-RESOURCE ENDPOINTS ---

@router.get("/{classroom_id}/students", response_model=List[student_model.StudentWithUser], summary="List Enrolled Students")
def get_enrolled_students(classroom_id: str, ctx: CurrentContext = Depends(require_staff), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    return class_service.get_enrolled_students(classroom_id=classroom_id, ctx=ctx, db=db)

@router.post("/{classroom_id}/students", status_code=status.HTTP_204_NO_CONTENT, summary="Enroll a Student")
def enroll_student(classroom_id: str, enrollment: class_model.EnrollmentRequest, ctx: CurrentContext = Depends(require_staff), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    # Enrolling twice is not an error.
    class_service.enroll_student(classroom_id=classroom_id, student_id=enrollment.student_id, ctx=ctx, db=db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.delete("/{classroom_id}/students/{student_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Remove a Student from a Classroom")
def remove_student(classroom_id: str, student_id: str, ctx: CurrentContext = Depends(require_staff), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    class_service.remove_student(classroom_id=classroom_id, student_id=student_id, ctx=ctx, db=db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
