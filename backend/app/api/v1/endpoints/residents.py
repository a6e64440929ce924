"""
Resident API Endpoints.

Residents are the people attached to units (shareholders, tenants,
occupants). Mutations are audited as ``resident`` with summaries naming
the resident.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from backend.app.db.session import get_db
from backend.app.db.lookups import ensure_reference
from backend.app.models.resident import Resident
from backend.app.models.unit import Unit
from backend.app.models.enums import AuditAction, ResidentRole
from backend.app.schemas.resident import ResidentCreate, ResidentUpdate, ResidentResponse
from backend.app.core.exceptions import ResourceNotFoundError
from backend.app.core.guards import require_permission
from backend.app.core.permissions import Permission
from backend.app.core.principal import Principal
from backend.app.services.audit_trail import audited, body_field, path_param

router = APIRouter(prefix="/residents", tags=["Residents"])


def _full_name(body: dict) -> str:
    return f"{body['first_name']} {body['last_name']}"


async def _get_resident_or_404(db: AsyncSession, resident_id: str) -> Resident:
    resident = await db.get(Resident, resident_id)
    if not resident:
        raise ResourceNotFoundError("Resident", resident_id)
    return resident


@router.get("", response_model=List[ResidentResponse])
async def list_residents(
    unit_id: Optional[str] = Query(None),
    role: Optional[ResidentRole] = Query(None),
    principal: Principal = Depends(require_permission(Permission.RESIDENTS_READ)),
    db: AsyncSession = Depends(get_db)
):
    """List residents, optionally filtered by unit and role."""
    query = select(Resident).order_by(Resident.last_name, Resident.first_name)
    if unit_id:
        query = query.where(Resident.unit_id == unit_id)
    if role:
        query = query.where(Resident.role == role.value)

    result = await db.execute(query)
    return [ResidentResponse.model_validate(r) for r in result.scalars().all()]


@router.get("/{resident_id}", response_model=ResidentResponse)
async def get_resident(
    resident_id: str,
    principal: Principal = Depends(require_permission(Permission.RESIDENTS_READ)),
    db: AsyncSession = Depends(get_db)
):
    resident = await _get_resident_or_404(db, resident_id)
    return ResidentResponse.model_validate(resident)


@router.post("", response_model=ResidentResponse, status_code=status.HTTP_201_CREATED)
@audited(AuditAction.CREATE, "resident", body_field("id"),
         lambda request, body: f"Added resident {_full_name(body)}")
async def create_resident(
    resident_data: ResidentCreate,
    principal: Principal = Depends(require_permission(Permission.RESIDENTS_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    """Add a resident."""
    await ensure_reference(db, Unit, resident_data.unit_id, "Unit")

    resident = Resident(**resident_data.model_dump())
    resident.role = resident_data.role.value

    db.add(resident)
    await db.commit()
    await db.refresh(resident)

    return ResidentResponse.model_validate(resident)


@router.put("/{resident_id}", response_model=ResidentResponse)
@audited(AuditAction.UPDATE, "resident", path_param("resident_id"),
         lambda request, body: f"Updated resident {_full_name(body)}")
async def update_resident(
    resident_id: str,
    resident_data: ResidentUpdate,
    principal: Principal = Depends(require_permission(Permission.RESIDENTS_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    resident = await _get_resident_or_404(db, resident_id)
    changes = resident_data.model_dump(exclude_unset=True)
    await ensure_reference(db, Unit, changes.get("unit_id"), "Unit")

    for field, value in changes.items():
        if isinstance(value, ResidentRole):
            value = value.value
        setattr(resident, field, value)

    await db.commit()
    await db.refresh(resident)

    return ResidentResponse.model_validate(resident)


@router.delete("/{resident_id}", status_code=status.HTTP_204_NO_CONTENT)
@audited(AuditAction.DELETE, "resident", path_param("resident_id"),
         lambda request, body: f"Removed resident {request.path_params['resident_id']}")
async def delete_resident(
    resident_id: str,
    principal: Principal = Depends(require_permission(Permission.RESIDENTS_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    resident = await _get_resident_or_404(db, resident_id)
    await db.delete(resident)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
