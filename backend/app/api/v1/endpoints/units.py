"""
Unit API Endpoints.

CRUD for apartment units. Every mutation is audited as ``unit``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from backend.app.db.session import get_db
from backend.app.models.unit import Unit
from backend.app.models.resident import Resident
from backend.app.models.enums import AuditAction
from backend.app.schemas.unit import UnitCreate, UnitUpdate, UnitResponse
from backend.app.schemas.resident import ResidentResponse
from backend.app.core.exceptions import ResourceNotFoundError
from backend.app.core.guards import require_permission
from backend.app.core.permissions import Permission
from backend.app.core.principal import Principal
from backend.app.services.audit_trail import audited, body_field, path_param

router = APIRouter(prefix="/units", tags=["Units"])


async def _get_unit_or_404(db: AsyncSession, unit_id: str) -> Unit:
    unit = await db.get(Unit, unit_id)
    if not unit:
        raise ResourceNotFoundError("Unit", unit_id)
    return unit


@router.get("", response_model=List[UnitResponse])
async def list_units(
    building_id: Optional[str] = Query(None, description="Only units of this building"),
    principal: Principal = Depends(require_permission(Permission.UNITS_READ)),
    db: AsyncSession = Depends(get_db)
):
    """List units ordered by unit number."""
    query = select(Unit).order_by(Unit.unit_number)
    if building_id:
        query = query.where(Unit.building_id == building_id)

    result = await db.execute(query)
    return [UnitResponse.model_validate(unit) for unit in result.scalars().all()]


@router.get("/{unit_id}", response_model=UnitResponse)
async def get_unit(
    unit_id: str,
    principal: Principal = Depends(require_permission(Permission.UNITS_READ)),
    db: AsyncSession = Depends(get_db)
):
    unit = await _get_unit_or_404(db, unit_id)
    return UnitResponse.model_validate(unit)


@router.get("/{unit_id}/residents", response_model=List[ResidentResponse])
async def list_unit_residents(
    unit_id: str,
    principal: Principal = Depends(require_permission(Permission.RESIDENTS_READ)),
    db: AsyncSession = Depends(get_db)
):
    """List the residents of one unit, primary resident first."""
    await _get_unit_or_404(db, unit_id)
    result = await db.execute(
        select(Resident)
        .where(Resident.unit_id == unit_id)
        .order_by(Resident.is_primary.desc(), Resident.last_name)
    )
    return [ResidentResponse.model_validate(r) for r in result.scalars().all()]


@router.post("", response_model=UnitResponse, status_code=status.HTTP_201_CREATED)
@audited(AuditAction.CREATE, "unit", body_field("id"),
         lambda request, body: f"Added unit {body['unit_number']}")
async def create_unit(
    unit_data: UnitCreate,
    principal: Principal = Depends(require_permission(Permission.UNITS_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    """Create a unit."""
    unit = Unit(**unit_data.model_dump(mode="json"))

    db.add(unit)
    await db.commit()
    await db.refresh(unit)

    return UnitResponse.model_validate(unit)


@router.put("/{unit_id}", response_model=UnitResponse)
@audited(AuditAction.UPDATE, "unit", path_param("unit_id"),
         lambda request, body: f"Updated unit {body['unit_number']}")
async def update_unit(
    unit_id: str,
    unit_data: UnitUpdate,
    principal: Principal = Depends(require_permission(Permission.UNITS_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    """
    Update a unit.

    Rate or share changes affect later charge generation only; charges
    already generated keep their amounts.
    """
    unit = await _get_unit_or_404(db, unit_id)
    for field, value in unit_data.model_dump(mode="json", exclude_unset=True).items():
        setattr(unit, field, value)

    await db.commit()
    await db.refresh(unit)

    return UnitResponse.model_validate(unit)


@router.delete("/{unit_id}", status_code=status.HTTP_204_NO_CONTENT)
@audited(AuditAction.DELETE, "unit", path_param("unit_id"),
         lambda request, body: f"Deleted unit {request.path_params['unit_id']}")
async def delete_unit(
    unit_id: str,
    principal: Principal = Depends(require_permission(Permission.UNITS_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    """Delete a unit together with its residents, charges and packages."""
    unit = await _get_unit_or_404(db, unit_id)
    await db.delete(unit)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
