"""
Audit Trail API Endpoints.

Read-only views of the audit log. Restricted to principals that may read
user accounts.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from backend.app.core.config import settings
from backend.app.core.guards import require_permission
from backend.app.core.permissions import Permission
from backend.app.core.principal import Principal
from backend.app.schemas.audit import AuditEntryResponse
from backend.app.services.audit import AuditFilter, AuditRecorder, get_audit_recorder

router = APIRouter(prefix="/audit", tags=["Audit"])


@router.get("", response_model=List[AuditEntryResponse])
async def list_audit_entries(
    resource_type: Optional[str] = Query(None, description="e.g. resident, finance"),
    limit: int = Query(settings.audit_default_limit, ge=1, le=1000),
    principal: Principal = Depends(require_permission(Permission.USERS_READ)),
    recorder: AuditRecorder = Depends(get_audit_recorder),
):
    """Most recent audit entries, newest first."""
    entries = await recorder.query(AuditFilter(resource_type=resource_type, limit=limit))
    return [AuditEntryResponse.model_validate(e) for e in entries]


@router.get("/{resource_id}", response_model=List[AuditEntryResponse])
async def get_resource_trail(
    resource_id: str,
    principal: Principal = Depends(require_permission(Permission.USERS_READ)),
    recorder: AuditRecorder = Depends(get_audit_recorder),
):
    """History of a single resource, newest first."""
    entries = await recorder.query(
        AuditFilter(resource_id=resource_id, limit=settings.audit_resource_trail_limit)
    )
    return [AuditEntryResponse.model_validate(e) for e in entries]
