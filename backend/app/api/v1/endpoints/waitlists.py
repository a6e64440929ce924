"""
Waitlist API Endpoints.

One table holds every waitlist; ``type`` says which list an entry is on.
Residents hold ``waitlists:write`` so they can sign themselves up.
Mutations are audited as ``waitlist``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
from backend.app.db.session import get_db
from backend.app.db.lookups import ensure_reference, get_or_404
from backend.app.models.waitlist import WaitlistEntry
from backend.app.models.resident import Resident
from backend.app.models.enums import AuditAction
from backend.app.schemas.waitlist import WaitlistEntryCreate, WaitlistEntryUpdate, WaitlistEntryResponse
from backend.app.core.guards import require_permission
from backend.app.core.permissions import Permission
from backend.app.core.principal import Principal
from backend.app.services.audit_trail import audited, body_field, path_param

router = APIRouter(prefix="/waitlists", tags=["Waitlists"])


@router.get("", response_model=List[WaitlistEntryResponse])
async def list_waitlist(
    waitlist_type: Optional[str] = Query(None, alias="type", description="Only this waitlist"),
    principal: Principal = Depends(require_permission(Permission.WAITLISTS_READ)),
    db: AsyncSession = Depends(get_db)
):
    """List entries grouped by waitlist, in queue order."""
    query = select(WaitlistEntry).order_by(WaitlistEntry.type, WaitlistEntry.position)
    if waitlist_type:
        query = query.where(WaitlistEntry.type == waitlist_type)

    result = await db.execute(query)
    return [WaitlistEntryResponse.model_validate(e) for e in result.scalars().all()]


@router.post("", response_model=WaitlistEntryResponse, status_code=status.HTTP_201_CREATED)
@audited(AuditAction.CREATE, "waitlist", body_field("id"),
         lambda request, body: f"Added to {body['type']} waitlist at position {body['position']}")
async def join_waitlist(
    entry_data: WaitlistEntryCreate,
    principal: Principal = Depends(require_permission(Permission.WAITLISTS_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    """Add a resident to a waitlist; without a position the entry goes last."""
    await ensure_reference(db, Resident, entry_data.resident_id, "Resident")

    position = entry_data.position
    if position is None:
        result = await db.execute(
            select(func.max(WaitlistEntry.position)).where(WaitlistEntry.type == entry_data.type)
        )
        position = (result.scalar() or 0) + 1

    entry = WaitlistEntry(type=entry_data.type, resident_id=entry_data.resident_id, position=position)

    db.add(entry)
    await db.commit()
    await db.refresh(entry)

    return WaitlistEntryResponse.model_validate(entry)


@router.put("/{entry_id}", response_model=WaitlistEntryResponse)
@audited(AuditAction.UPDATE, "waitlist", path_param("entry_id"),
         lambda request, body: f"Updated {body['type']} waitlist entry {body['id']}")
async def update_waitlist_entry(
    entry_id: str,
    entry_data: WaitlistEntryUpdate,
    principal: Principal = Depends(require_permission(Permission.WAITLISTS_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    """Move an entry or mark it fulfilled."""
    entry = await get_or_404(db, WaitlistEntry, entry_id, "Waitlist entry")
    for field, value in entry_data.model_dump(exclude_unset=True).items():
        setattr(entry, field, value)

    await db.commit()
    await db.refresh(entry)

    return WaitlistEntryResponse.model_validate(entry)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
@audited(AuditAction.DELETE, "waitlist", path_param("entry_id"),
         lambda request, body: f"Removed waitlist entry {request.path_params['entry_id']}")
async def leave_waitlist(
    entry_id: str,
    principal: Principal = Depends(require_permission(Permission.WAITLISTS_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    entry = await get_or_404(db, WaitlistEntry, entry_id, "Waitlist entry")
    await db.delete(entry)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
