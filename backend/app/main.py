"""
FastAPI Application Entry Point.

This is the main application file for the Building Manager Backend.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from backend.app.core.config import settings
from backend.app.api.v1.router import router as api_v1_router
from backend.app.db.session import engine, Base
from backend.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)
from backend.app.core.logging_config import setup_logger
from backend.app.core.observability import ObservabilityMiddleware
from backend.app.services.audit import audit_recorder

# Import models to ensure they are registered with Base
from backend.app.models.user import User
from backend.app.models.unit import Unit
from backend.app.models.resident import Resident
from backend.app.models.maintenance_request import MaintenanceRequest
from backend.app.models.document import Document
from backend.app.models.maintenance_charge import MaintenanceCharge
from backend.app.models.assessment import Assessment, AssessmentCharge
from backend.app.models.announcement import Announcement
from backend.app.models.board_member import BoardMember
from backend.app.models.package import Package
from backend.app.models.waitlist import WaitlistEntry
from backend.app.models.audit_log import AuditLog

logger = setup_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Creates database tables on startup.
    2. Waits for in-flight audit writes on shutdown.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s started", settings.app_name)
    yield
    await audit_recorder.drain()
    await engine.dispose()


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Building management backend: units, residents, maintenance, documents and finances",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
    }


# Include API v1 router
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")
