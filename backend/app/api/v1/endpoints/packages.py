"""
Package API Endpoints.

Front-desk delivery log. Residents hold ``packages:write`` so they can
log and collect their own deliveries. Mutations are audited as
``package``.
"""

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from backend.app.db.session import get_db
from backend.app.db.lookups import ensure_reference, get_or_404
from backend.app.models.package import Package
from backend.app.models.unit import Unit
from backend.app.models.enums import AuditAction, PackageStatus
from backend.app.schemas.package import PackageCreate, PackageUpdate, PackageResponse
from backend.app.core.guards import require_permission
from backend.app.core.permissions import Permission
from backend.app.core.principal import Principal
from backend.app.services.audit_trail import audited, body_field, path_param

router = APIRouter(prefix="/packages", tags=["Packages"])


@router.get("", response_model=List[PackageResponse])
async def list_packages(
    unit_id: Optional[str] = Query(None),
    package_status: Optional[PackageStatus] = Query(None, alias="status"),
    source: Optional[str] = Query(None),
    principal: Principal = Depends(require_permission(Permission.PACKAGES_READ)),
    db: AsyncSession = Depends(get_db)
):
    """List packages, most recently received first."""
    query = select(Package).order_by(Package.received_at.desc())
    if unit_id:
        query = query.where(Package.unit_id == unit_id)
    if package_status:
        query = query.where(Package.status == package_status.value)
    if source:
        query = query.where(Package.source == source)

    result = await db.execute(query)
    return [PackageResponse.model_validate(p) for p in result.scalars().all()]


@router.get("/{package_id}", response_model=PackageResponse)
async def get_package(
    package_id: str,
    principal: Principal = Depends(require_permission(Permission.PACKAGES_READ)),
    db: AsyncSession = Depends(get_db)
):
    package = await get_or_404(db, Package, package_id, "Package")
    return PackageResponse.model_validate(package)


@router.post("", response_model=PackageResponse, status_code=status.HTTP_201_CREATED)
@audited(AuditAction.CREATE, "package", body_field("id"),
         lambda request, body: f"Logged package {body['tracking_number'] or body['id']}")
async def log_package(
    package_data: PackageCreate,
    principal: Principal = Depends(require_permission(Permission.PACKAGES_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    await ensure_reference(db, Unit, package_data.unit_id, "Unit")
    package = Package(**package_data.model_dump(exclude={"status"}), status=package_data.status.value)

    db.add(package)
    await db.commit()
    await db.refresh(package)

    return PackageResponse.model_validate(package)


@router.put("/{package_id}", response_model=PackageResponse)
@audited(AuditAction.UPDATE, "package", path_param("package_id"),
         lambda request, body: f"Updated package {request.path_params['package_id']} to {body['status']}")
async def update_package(
    package_id: str,
    package_data: PackageUpdate,
    principal: Principal = Depends(require_permission(Permission.PACKAGES_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    """
    Update a package.

    Marking it ``picked_up`` stamps ``picked_up_at`` (now, unless given);
    any other status clears it.
    """
    package = await get_or_404(db, Package, package_id, "Package")
    changes = package_data.model_dump(exclude_unset=True)
    new_status = changes.pop("status", None)
    picked_up_at = changes.pop("picked_up_at", None)

    for field, value in changes.items():
        setattr(package, field, value)

    if new_status is not None:
        package.status = new_status.value
        if new_status == PackageStatus.PICKED_UP:
            package.picked_up_at = picked_up_at or datetime.now(timezone.utc)
        else:
            package.picked_up_at = None

    await db.commit()
    await db.refresh(package)

    return PackageResponse.model_validate(package)


@router.delete("/{package_id}", status_code=status.HTTP_204_NO_CONTENT)
@audited(AuditAction.DELETE, "package", path_param("package_id"),
         lambda request, body: f"Removed package {request.path_params['package_id']}")
async def delete_package(
    package_id: str,
    principal: Principal = Depends(require_permission(Permission.PACKAGES_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    package = await get_or_404(db, Package, package_id, "Package")
    await db.delete(package)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
