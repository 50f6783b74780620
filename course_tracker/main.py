# /course-tracker/course_tracker/main.py

# --- Core FastAPI Imports ---
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# --- Application-specific Imports ---
from .core.errors import CourseTrackerError
from .core.logging_config import setup_logging
from .db.database import init_db
from .routers import (
    academics_router,
    activities_router,
    full_creation_router,
    notifications_router,
    offerings_router,
    users_router,
)

logger = logging.getLogger(__name__)


# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # This code runs ONCE when the application starts up.
    setup_logging()
    init_db()
    logger.info("Course tracker started")
    yield


# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title="Course Tracker API",
    description="Course delivery tracking: offerings, facilitators and weekly activity reports.",
    version="1.0.0",
    lifespan=lifespan,
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error Translation ---
@app.exception_handler(CourseTrackerError)
async def course_tracker_error_handler(request: Request, exc: CourseTrackerError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_report())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # Request bodies are reported in the same per-field shape the services use.
    errors = [
        {"field": ".".join(str(part) for part in err["loc"] if part not in ("body", "query", "path", "header")), "message": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=422, content={"detail": "Validation failed", "errors": errors})


# --- API Router Inclusion ---
app.include_router(users_router.router, prefix="/api/users", tags=["Users"])
app.include_router(academics_router.cohorts_router, prefix="/api/cohorts", tags=["Cohorts"])
app.include_router(academics_router.classes_router, prefix="/api/classes", tags=["Classes"])
app.include_router(academics_router.modules_router, prefix="/api/modules", tags=["Modules"])
app.include_router(academics_router.modes_router, prefix="/api/modes", tags=["Modes"])
app.include_router(offerings_router.router, prefix="/api/courses", tags=["Course Offerings"])
app.include_router(activities_router.router, prefix="/api/activities", tags=["Activities"])
app.include_router(notifications_router.router, prefix="/api/notifications", tags=["Notifications"])
app.include_router(full_creation_router.router, prefix="/api/full-creation", tags=["Full Record Creation"])


# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "Course Tracker is running!", "version": app.version}
