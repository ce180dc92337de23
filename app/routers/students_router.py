# /app/routers/students_router.py

from fastapi import APIRouter, Depends, status
from typing import List

from ..core.deps import require_staff
from ..models import student_model
from ..models.user_model import CurrentContext
from ..services import student_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()


@router.get("", response_model=List[student_model.StudentWithUser], summary="List Students of the Tenant")
def get_students(ctx: CurrentContext = Depends(require_staff), db: DatabaseService = Depends(get_db_service)):
    return student_service.get_students(ctx=ctx, db=db)


@router.post("", response_model=student_model.ProvisionedStudent, status_code=status.HTTP_201_CREATED, summary="Provision a Student Account")
def provision_student(student_create: student_model.StudentCreate, ctx: CurrentContext = Depends(require_staff), db: DatabaseService = Depends(get_db_service)):
    return student_service.provision_student(student_data=student_create, ctx=ctx, db=db)


@router.get("/by-code/{student_code}", response_model=student_model.StudentWithUser, summary="Look Up a Student by Code")
def get_student_by_code(student_code: str, ctx: CurrentContext = Depends(require_staff), db: DatabaseService = Depends(get_db_service)):
    return student_service.get_student_by_code(code=student_code, ctx=ctx, db=db)
