"""
Maintenance Request API Endpoints.

Residents submit requests (``maintenance:write``); staff update status and
assignment (``maintenance:manage``). Both are audited as ``maintenance``.
"""

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from backend.app.db.session import get_db
from backend.app.db.lookups import ensure_reference
from backend.app.models.maintenance_request import MaintenanceRequest
from backend.app.models.resident import Resident
from backend.app.models.unit import Unit
from backend.app.models.enums import AuditAction, MaintenanceStatus
from backend.app.schemas.maintenance import (
    MaintenanceRequestCreate, MaintenanceRequestUpdate, MaintenanceRequestResponse
)
from backend.app.core.exceptions import ResourceNotFoundError
from backend.app.core.guards import require_permission
from backend.app.core.permissions import Permission
from backend.app.core.principal import Principal
from backend.app.services.audit_trail import audited, body_field, path_param

router = APIRouter(prefix="/maintenance", tags=["Maintenance"])


async def _get_request_or_404(db: AsyncSession, request_id: str) -> MaintenanceRequest:
    maintenance_request = await db.get(MaintenanceRequest, request_id)
    if not maintenance_request:
        raise ResourceNotFoundError("Maintenance request", request_id)
    return maintenance_request


@router.get("", response_model=List[MaintenanceRequestResponse])
async def list_requests(
    unit_id: Optional[str] = Query(None),
    request_status: Optional[MaintenanceStatus] = Query(None, alias="status"),
    principal: Principal = Depends(require_permission(Permission.MAINTENANCE_READ)),
    db: AsyncSession = Depends(get_db)
):
    """List maintenance requests, newest first."""
    query = select(MaintenanceRequest).order_by(MaintenanceRequest.created_at.desc())
    if unit_id:
        query = query.where(MaintenanceRequest.unit_id == unit_id)
    if request_status:
        query = query.where(MaintenanceRequest.status == request_status.value)

    result = await db.execute(query)
    return [MaintenanceRequestResponse.model_validate(r) for r in result.scalars().all()]


@router.get("/{request_id}", response_model=MaintenanceRequestResponse)
async def get_request(
    request_id: str,
    principal: Principal = Depends(require_permission(Permission.MAINTENANCE_READ)),
    db: AsyncSession = Depends(get_db)
):
    maintenance_request = await _get_request_or_404(db, request_id)
    return MaintenanceRequestResponse.model_validate(maintenance_request)


@router.post("", response_model=MaintenanceRequestResponse, status_code=status.HTTP_201_CREATED)
@audited(AuditAction.CREATE, "maintenance", body_field("id"),
         lambda request, body: f"Submitted maintenance request: {body['title']}")
async def submit_request(
    request_data: MaintenanceRequestCreate,
    principal: Principal = Depends(require_permission(Permission.MAINTENANCE_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    """Submit a maintenance request. New requests start ``open``."""
    await ensure_reference(db, Unit, request_data.unit_id, "Unit")
    await ensure_reference(db, Resident, request_data.submitted_by, "Resident")

    maintenance_request = MaintenanceRequest(
        unit_id=request_data.unit_id,
        submitted_by=request_data.submitted_by,
        title=request_data.title,
        description=request_data.description,
        category=request_data.category,
        priority=request_data.priority.value,
        status=MaintenanceStatus.OPEN.value,
    )

    db.add(maintenance_request)
    await db.commit()
    await db.refresh(maintenance_request)

    return MaintenanceRequestResponse.model_validate(maintenance_request)


@router.put("/{request_id}", response_model=MaintenanceRequestResponse)
@audited(AuditAction.UPDATE, "maintenance", path_param("request_id"),
         lambda request, body: f"Updated maintenance request {body['title']} to {body['status']}")
async def update_request(
    request_id: str,
    request_data: MaintenanceRequestUpdate,
    principal: Principal = Depends(require_permission(Permission.MAINTENANCE_MANAGE)),
    db: AsyncSession = Depends(get_db)
):
    """
    Update status, priority or assignment.

    Closing a request stamps ``resolved_at``; reopening clears it.
    """
    maintenance_request = await _get_request_or_404(db, request_id)
    changes = request_data.model_dump(mode="json", exclude_unset=True)

    if changes.get("status") is not None:
        maintenance_request.status = changes["status"]
        if changes["status"] == MaintenanceStatus.CLOSED.value:
            maintenance_request.resolved_at = datetime.now(timezone.utc)
        else:
            maintenance_request.resolved_at = None
    if changes.get("priority") is not None:
        maintenance_request.priority = changes["priority"]
    if "assigned_to" in changes:
        maintenance_request.assigned_to = changes["assigned_to"]
    if "category" in changes:
        maintenance_request.category = changes["category"]

    await db.commit()
    await db.refresh(maintenance_request)

    return MaintenanceRequestResponse.model_validate(maintenance_request)
