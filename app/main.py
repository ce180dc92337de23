# /app/main.py

# --- Core FastAPI Imports ---
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# --- Application-specific Imports ---
from .core.config import CORS_ORIGINS
from .core.exceptions import (
    DomainError, NotFoundError, PermissionDeniedError, ValidationError,
    DuplicateConflictError, WindowClosedError, UpstreamFailureError
)
from .core.logging_config import configure_logging
from .db.base import Base
from .db.database import engine
from .routers import (
    auth_router,
    students_router,
    classes_router,
    exams_router,
    homework_router,
    live_sessions_router,
    videos_router,
    notifications_router,
    dashboard_router,
    calendar_router,
)

logger = logging.getLogger(__name__)

# Most specific first; the first match wins.
ERROR_STATUS_CODES = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (ValidationError, 422),
    (DuplicateConflictError, status.HTTP_409_CONFLICT),
    (WindowClosedError, status.HTTP_409_CONFLICT),
    (UpstreamFailureError, status.HTTP_502_BAD_GATEWAY),
]


def status_code_for(error: DomainError) -> int:
    for error_type, code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # This code runs ONCE when the application starts up.
    configure_logging()
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready.")
    yield

# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title="Classroom Backend API",
    description="Classrooms, exams, homework, live sessions, videos and notifications for schools and tutoring centers.",
    version="1.0.0",
    lifespan=lifespan
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Domain Error Translation ---
@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    code = status_code_for(exc)
    if code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=code, content={"detail": exc.message, "error": type(exc).__name__})

# --- API Router Inclusion ---
app.include_router(auth_router.router, prefix="/api/auth", tags=["Auth"])
app.include_router(dashboard_router.router, prefix="/api/dashboard", tags=["Dashboard"])
app.include_router(students_router.router, prefix="/api/students", tags=["Students"])
app.include_router(classes_router.router, prefix="/api/classes", tags=["Classes"])
app.include_router(exams_router.router, prefix="/api/exams", tags=["Exams"])
app.include_router(homework_router.router, prefix="/api/homework", tags=["Homework"])
app.include_router(live_sessions_router.router, prefix="/api/live-sessions", tags=["Live Sessions"])
app.include_router(videos_router.router, prefix="/api/videos", tags=["Videos"])
app.include_router(notifications_router.router, prefix="/api/notifications", tags=["Notifications"])
app.include_router(calendar_router.router, prefix="/api/calendar", tags=["Calendar"])

# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "Classroom Backend is running!", "version": app.version}
