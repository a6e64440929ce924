"""
Announcement API Endpoints.

Everyone with ``announcements:read`` sees the notice board; posting and
editing take ``announcements:write``. Mutations are audited as
``announcement``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from backend.app.db.session import get_db
from backend.app.db.lookups import ensure_reference, get_or_404
from backend.app.models.announcement import Announcement
from backend.app.models.resident import Resident
from backend.app.models.enums import AuditAction
from backend.app.schemas.announcement import AnnouncementCreate, AnnouncementUpdate, AnnouncementResponse
from backend.app.core.guards import require_permission
from backend.app.core.permissions import Permission
from backend.app.core.principal import Principal
from backend.app.services.audit_trail import audited, body_field, path_param

router = APIRouter(prefix="/announcements", tags=["Announcements"])


@router.get("", response_model=List[AnnouncementResponse])
async def list_announcements(
    category: Optional[str] = Query(None),
    principal: Principal = Depends(require_permission(Permission.ANNOUNCEMENTS_READ)),
    db: AsyncSession = Depends(get_db)
):
    """List announcements, newest first."""
    query = select(Announcement).order_by(Announcement.posted_at.desc())
    if category:
        query = query.where(Announcement.category == category)

    result = await db.execute(query)
    return [AnnouncementResponse.model_validate(a) for a in result.scalars().all()]


@router.get("/{announcement_id}", response_model=AnnouncementResponse)
async def get_announcement(
    announcement_id: str,
    principal: Principal = Depends(require_permission(Permission.ANNOUNCEMENTS_READ)),
    db: AsyncSession = Depends(get_db)
):
    announcement = await get_or_404(db, Announcement, announcement_id, "Announcement")
    return AnnouncementResponse.model_validate(announcement)


@router.post("", response_model=AnnouncementResponse, status_code=status.HTTP_201_CREATED)
@audited(AuditAction.CREATE, "announcement", body_field("id"),
         lambda request, body: f"Posted announcement {body['title']}")
async def create_announcement(
    announcement_data: AnnouncementCreate,
    principal: Principal = Depends(require_permission(Permission.ANNOUNCEMENTS_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    await ensure_reference(db, Resident, announcement_data.posted_by, "Resident")
    announcement = Announcement(**announcement_data.model_dump())

    db.add(announcement)
    await db.commit()
    await db.refresh(announcement)

    return AnnouncementResponse.model_validate(announcement)


@router.put("/{announcement_id}", response_model=AnnouncementResponse)
@audited(AuditAction.UPDATE, "announcement", path_param("announcement_id"),
         lambda request, body: f"Updated announcement {body['title']}")
async def update_announcement(
    announcement_id: str,
    announcement_data: AnnouncementUpdate,
    principal: Principal = Depends(require_permission(Permission.ANNOUNCEMENTS_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    announcement = await get_or_404(db, Announcement, announcement_id, "Announcement")
    for field, value in announcement_data.model_dump(exclude_unset=True).items():
        setattr(announcement, field, value)

    await db.commit()
    await db.refresh(announcement)

    return AnnouncementResponse.model_validate(announcement)


@router.delete("/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT)
@audited(AuditAction.DELETE, "announcement", path_param("announcement_id"),
         lambda request, body: f"Removed announcement {request.path_params['announcement_id']}")
async def delete_announcement(
    announcement_id: str,
    principal: Principal = Depends(require_permission(Permission.ANNOUNCEMENTS_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    announcement = await get_or_404(db, Announcement, announcement_id, "Announcement")
    await db.delete(announcement)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
