# /app/routers/homework_router.py

from fastapi import APIRouter, Depends, status
from typing import List

from ..core.deps import require_staff, require_student
from ..models import homework_model
from ..models.user_model import CurrentContext
from ..services import homework_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()

# --- TEACHER ENDPOINTS ---

@router.get("", response_model=List[homework_model.Homework], summary="List Homework of the Tenant")
def get_homeworks(ctx: CurrentContext = Depends(require_staff), db: DatabaseService = Depends(get_db_service)):
    return homework_service.get_homeworks(ctx=ctx, db=db)

@router.post("", response_model=homework_model.Homework, status_code=status.HTTP_201_CREATED, summary="Create a Homework Assignment")
def create_homework(homework_create: homework_model.HomeworkCreate, ctx: CurrentContext = Depends(require_staff), db: DatabaseService = Depends(get_db_service)):
    return homework_service.create_homework(homework_data=homework_create, ctx=ctx, db=db)

@router.get("/{homework_id}/submissions", response_model=List[homework_model.HomeworkSubmission], summary="List Submissions with Student Details")
def get_submissions(homework_id: str, ctx: CurrentContext = Depends(require_staff), db: DatabaseService = Depends(get_db_service)):
    return homework_service.get_submissions(homework_id=homework_id, ctx=ctx, db=db)

@router.put("/submissions/{submission_id}/grade", response_model=homework_model.HomeworkSubmission, summary="Grade a Submission (0-10)")
def grade_submission(submission_id: str, grade_request: homework_model.GradeRequest, ctx: CurrentContext = Depends(require_staff), db: DatabaseService = Depends(get_db_service)):
    return homework_service.grade_submission(submission_id=submission_id, grade_data=grade_request, ctx=ctx, db=db)

# --- STUDENT ENDPOINTS ---

@router.get("/mine", response_model=List[homework_model.StudentHomework], summary="List My Homework with Submission State")
def get_my_homeworks(ctx: CurrentContext = Depends(require_student), db: DatabaseService = Depends(get_db_service)):
    return homework_service.get_student_homeworks(ctx=ctx, db=db)

@router.post("/{homework_id}/submit", response_model=homework_model.HomeworkSubmission, status_code=status.HTTP_201_CREATED, summary="Submit Homework")
def submit_homework(homework_id: str, submission: homework_model.HomeworkSubmissionCreate, ctx: CurrentContext = Depends(require_student), db: DatabaseService = Depends(get_db_service)):
    return homework_service.submit_homework(homework_id=homework_id, submission=submission, ctx=ctx, db=db)
