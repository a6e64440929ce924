"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from backend.app.api.v1.endpoints import (
    auth, units, residents, maintenance, documents, finances, audit,
    announcements, board, packages, waitlists,
)

router = APIRouter()

# Authentication and user management
router.include_router(auth.router)

# Building records
router.include_router(units.router)
router.include_router(residents.router)
router.include_router(maintenance.router)
router.include_router(documents.router)

# Community
router.include_router(announcements.router)
router.include_router(board.router)
router.include_router(packages.router)
router.include_router(waitlists.router)

# Maintenance charges and assessments
router.include_router(finances.router)

# Audit trail (read-only)
router.include_router(audit.router)
