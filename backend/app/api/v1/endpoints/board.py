"""
Board API Endpoints.

Board seats held by residents. Active seats list in order of office
(president first); ``active=false`` lists every seat ever held, current
ones first. Mutations are audited as ``board``.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import case, select
from backend.app.db.session import get_db
from backend.app.db.lookups import ensure_reference, get_or_404
from backend.app.models.board_member import BoardMember
from backend.app.models.resident import Resident
from backend.app.models.enums import AuditAction, BoardRole
from backend.app.schemas.board import BoardMemberCreate, BoardMemberUpdate, BoardMemberResponse
from backend.app.core.guards import require_permission
from backend.app.core.permissions import Permission
from backend.app.core.principal import Principal
from backend.app.services.audit_trail import audited, body_field, path_param

router = APIRouter(prefix="/board", tags=["Board"])

# Lower ranks list first; unknown offices sort last
OFFICE_RANK = case(
    {role.value: rank for rank, role in enumerate(BoardRole)},
    value=BoardMember.role,
    else_=len(BoardRole),
)


@router.get("", response_model=List[BoardMemberResponse])
async def list_board_members(
    active: bool = Query(True, description="Only current seats"),
    principal: Principal = Depends(require_permission(Permission.BOARD_READ)),
    db: AsyncSession = Depends(get_db)
):
    if active:
        query = select(BoardMember).where(BoardMember.is_active.is_(True)).order_by(OFFICE_RANK)
    else:
        query = select(BoardMember).order_by(BoardMember.is_active.desc(), BoardMember.term_start.desc())

    result = await db.execute(query)
    return [BoardMemberResponse.model_validate(m) for m in result.scalars().all()]


@router.post("", response_model=BoardMemberResponse, status_code=status.HTTP_201_CREATED)
@audited(AuditAction.CREATE, "board", body_field("id"),
         lambda request, body: f"Seated board {body['role']}")
async def create_board_member(
    member_data: BoardMemberCreate,
    principal: Principal = Depends(require_permission(Permission.BOARD_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    await ensure_reference(db, Resident, member_data.resident_id, "Resident")
    member = BoardMember(**member_data.model_dump(exclude={"role"}), role=member_data.role.value)

    db.add(member)
    await db.commit()
    await db.refresh(member)

    return BoardMemberResponse.model_validate(member)


@router.put("/{member_id}", response_model=BoardMemberResponse)
@audited(AuditAction.UPDATE, "board", path_param("member_id"),
         lambda request, body: f"Updated board {body['role']}")
async def update_board_member(
    member_id: str,
    member_data: BoardMemberUpdate,
    principal: Principal = Depends(require_permission(Permission.BOARD_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    member = await get_or_404(db, BoardMember, member_id, "Board member")
    for field, value in member_data.model_dump(exclude_unset=True).items():
        if isinstance(value, BoardRole):
            value = value.value
        setattr(member, field, value)

    await db.commit()
    await db.refresh(member)

    return BoardMemberResponse.model_validate(member)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
@audited(AuditAction.DELETE, "board", path_param("member_id"),
         lambda request, body: f"Removed board member {request.path_params['member_id']}")
async def delete_board_member(
    member_id: str,
    principal: Principal = Depends(require_permission(Permission.BOARD_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    member = await get_or_404(db, BoardMember, member_id, "Board member")
    await db.delete(member)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
