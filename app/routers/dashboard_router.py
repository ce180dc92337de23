# /app/routers/dashboard_router.py

# --- Core FastAPI Imports ---
from fastapi import APIRouter, Depends

# --- Service and Model Imports ---
from ..core.deps import get_current_context
from ..services import dashboard_service
from ..services.database_service import DatabaseServiceFactory, get_db_service_factory
from ..models.dashboard_model import DashboardSummary
from ..models.user_model import CurrentContext

# --- APIRouter Instance ---
router = APIRouter()

# --- Endpoint Definition ---
@router.get(
    "/summary",
    response_model=DashboardSummary,
    summary="Get Dashboard Summary",
    description="Role-specific counts for the home page. A count that could not be computed is reported as 0."
)
async def get_dashboard_summary(
    ctx: CurrentContext = Depends(get_current_context),
    # Each count runs on its own session, so the service gets a factory
    # rather than the request's DatabaseService.
    db_factory: DatabaseServiceFactory = Depends(get_db_service_factory)
):
    return await dashboard_service.get_summary_data(ctx=ctx, db_factory=db_factory)
