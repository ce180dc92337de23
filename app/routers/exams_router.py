# /app/routers/exams_router.py

from fastapi import APIRouter, Depends, status
from typing import List

from ..core.deps import get_current_context, require_staff, require_student
from ..models import exam_model
from ..models.user_model import CurrentContext
from ..services import exam_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()


@router.get("", response_model=List[exam_model.Exam], summary="List Exams Visible to the Caller")
def get_exams(ctx: CurrentContext = Depends(get_current_context), db: DatabaseService = Depends(get_db_service)):
    return exam_service.get_exams(ctx=ctx, db=db)


@router.post("", response_model=exam_model.Exam, status_code=status.HTTP_201_CREATED, summary="Create an Exam with Questions")
def create_exam(exam_create: exam_model.ExamCreate, ctx: CurrentContext = Depends(require_staff), db: DatabaseService = Depends(get_db_service)):
    return exam_service.create_exam(exam_data=exam_create, ctx=ctx, db=db)


# The shape differs by role (students never receive correct answers), so the
# service's model is returned as is.
@router.get("/{exam_id}", response_model=None, summary="Get an Exam with its Questions")
def get_exam(exam_id: str, ctx: CurrentContext = Depends(get_current_context), db: DatabaseService = Depends(get_db_service)):
    return exam_service.get_exam_detail(exam_id=exam_id, ctx=ctx, db=db)


@router.post("/{exam_id}/submit", response_model=exam_model.ExamSubmission, status_code=status.HTTP_201_CREATED, summary="Submit Answers to an Active Exam")
def submit_exam(exam_id: str, submission: exam_model.ExamSubmissionCreate, ctx: CurrentContext = Depends(require_student), db: DatabaseService = Depends(get_db_service)):
    return exam_service.submit_exam(exam_id=exam_id, submission=submission, ctx=ctx, db=db)


@router.get("/{exam_id}/submissions", response_model=List[exam_model.ExamSubmission], summary="List Submissions of an Exam")
def get_exam_submissions(exam_id: str, ctx: CurrentContext = Depends(require_staff), db: DatabaseService = Depends(get_db_service)):
    return exam_service.get_exam_submissions(exam_id=exam_id, ctx=ctx, db=db)
