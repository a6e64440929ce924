"""
Finance API Endpoints.

Maintenance charges (recurring, per unit and month) and assessments
(one-time totals split by ownership share). Generation runs through the
BillingService; every mutation is audited as ``finance``.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from backend.app.db.session import get_db
from backend.app.db.lookups import ensure_reference
from backend.app.models.assessment import Assessment, AssessmentCharge
from backend.app.models.maintenance_charge import MaintenanceCharge
from backend.app.models.unit import Unit
from backend.app.models.enums import AuditAction, ChargeStatus
from backend.app.schemas.finance import (
    MaintenanceChargeCreate, MaintenanceChargeResponse, ChargeUpdate,
    GenerateChargesRequest, GenerateChargesResponse,
    AssessmentCreate, AssessmentResponse, AssessmentChargeResponse,
    GenerateAssessmentChargesResponse,
)
from backend.app.core.exceptions import ConflictError, ResourceNotFoundError
from backend.app.core.guards import require_permission
from backend.app.core.permissions import Permission
from backend.app.core.principal import Principal
from backend.app.domain.billing.allocation import BillingPeriod
from backend.app.domain.billing.billing_service import BillingService
from backend.app.services.audit_trail import audited, body_field, no_resource_id, path_param

router = APIRouter(prefix="/finances", tags=["Finances"])


def _apply_charge_update(charge, update: ChargeUpdate) -> None:
    charge.status = update.status.value
    if update.status == ChargeStatus.PAID:
        charge.paid_date = update.paid_date or date.today()
    else:
        charge.paid_date = None


# =====================================================
# Maintenance charges
# =====================================================

@router.get("/maintenance-charges", response_model=List[MaintenanceChargeResponse])
async def list_maintenance_charges(
    unit_id: Optional[str] = Query(None),
    period_year: Optional[int] = Query(None),
    period_month: Optional[int] = Query(None, ge=1, le=12),
    charge_status: Optional[ChargeStatus] = Query(None, alias="status"),
    principal: Principal = Depends(require_permission(Permission.FINANCES_READ)),
    db: AsyncSession = Depends(get_db)
):
    """List maintenance charges, latest period first."""
    query = select(MaintenanceCharge).order_by(
        MaintenanceCharge.period_year.desc(),
        MaintenanceCharge.period_month.desc(),
    )
    if unit_id:
        query = query.where(MaintenanceCharge.unit_id == unit_id)
    if period_year is not None:
        query = query.where(MaintenanceCharge.period_year == period_year)
    if period_month is not None:
        query = query.where(MaintenanceCharge.period_month == period_month)
    if charge_status:
        query = query.where(MaintenanceCharge.status == charge_status.value)

    result = await db.execute(query)
    return [MaintenanceChargeResponse.model_validate(c) for c in result.scalars().all()]


@router.post("/maintenance-charges", response_model=MaintenanceChargeResponse, status_code=status.HTTP_201_CREATED)
@audited(AuditAction.CREATE, "finance", body_field("id"),
         lambda request, body: f"Added charge for {body['period_month']}/{body['period_year']}")
async def create_maintenance_charge(
    charge_data: MaintenanceChargeCreate,
    principal: Principal = Depends(require_permission(Permission.FINANCES_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    """
    Enter a single charge by hand.

    Raises:
        404: If the unit does not exist
        409: If the unit already has a charge for the period
    """
    await ensure_reference(db, Unit, charge_data.unit_id, "Unit")

    period = BillingPeriod(month=charge_data.period_month, year=charge_data.period_year)
    charge = MaintenanceCharge(
        unit_id=charge_data.unit_id,
        period_month=period.month,
        period_year=period.year,
        amount=charge_data.amount,
        status=charge_data.status.value,
        due_date=charge_data.due_date or period.due_date,
    )

    db.add(charge)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(
            f"Unit already has a charge for {period.label}",
            details={"unit_id": charge_data.unit_id},
        )
    await db.refresh(charge)

    return MaintenanceChargeResponse.model_validate(charge)


@router.post("/maintenance-charges/generate", response_model=GenerateChargesResponse, status_code=status.HTTP_201_CREATED)
@audited(AuditAction.CREATE, "finance", no_resource_id,
         lambda request, body: f"Generated charges for {body['period_month']}/{body['period_year']}")
async def generate_maintenance_charges(
    request_data: GenerateChargesRequest,
    principal: Principal = Depends(require_permission(Permission.FINANCES_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    """
    Generate the month's recurring charge for every unit with a rate.

    Units already charged for the period are skipped, so the call can be
    repeated safely.
    """
    period = BillingPeriod(month=request_data.period_month, year=request_data.period_year)
    run = await BillingService.generate_maintenance_charges(db, period)

    return GenerateChargesResponse(
        period_month=period.month,
        period_year=period.year,
        generated=run.generated,
        skipped=run.skipped,
        charges=[MaintenanceChargeResponse.model_validate(c) for c in run.charges],
    )


@router.put("/maintenance-charges/{charge_id}", response_model=MaintenanceChargeResponse)
@audited(AuditAction.UPDATE, "finance", path_param("charge_id"),
         lambda request, body: f"Updated charge {request.path_params['charge_id']} to {body['status']}")
async def update_maintenance_charge(
    charge_id: str,
    update: ChargeUpdate,
    principal: Principal = Depends(require_permission(Permission.FINANCES_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    """Mark a charge paid or pending."""
    charge = await db.get(MaintenanceCharge, charge_id)
    if not charge:
        raise ResourceNotFoundError("Maintenance charge", charge_id)

    _apply_charge_update(charge, update)
    await db.commit()
    await db.refresh(charge)

    return MaintenanceChargeResponse.model_validate(charge)


# =====================================================
# Assessments
# =====================================================

@router.get("/assessments", response_model=List[AssessmentResponse])
async def list_assessments(
    principal: Principal = Depends(require_permission(Permission.FINANCES_READ)),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(Assessment).order_by(Assessment.created_at.desc()))
    return [AssessmentResponse.model_validate(a) for a in result.scalars().all()]


@router.post("/assessments", response_model=AssessmentResponse, status_code=status.HTTP_201_CREATED)
@audited(AuditAction.CREATE, "finance", body_field("id"),
         lambda request, body: f"Created assessment {body['title']}")
async def create_assessment(
    assessment_data: AssessmentCreate,
    principal: Principal = Depends(require_permission(Permission.FINANCES_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    """Create an assessment. Charges are generated separately."""
    assessment = Assessment(**assessment_data.model_dump())

    db.add(assessment)
    await db.commit()
    await db.refresh(assessment)

    return AssessmentResponse.model_validate(assessment)


@router.get("/assessments/{assessment_id}/charges", response_model=List[AssessmentChargeResponse])
async def list_assessment_charges(
    assessment_id: str,
    principal: Principal = Depends(require_permission(Permission.FINANCES_READ)),
    db: AsyncSession = Depends(get_db)
):
    if not await db.get(Assessment, assessment_id):
        raise ResourceNotFoundError("Assessment", assessment_id)

    result = await db.execute(
        select(AssessmentCharge)
        .where(AssessmentCharge.assessment_id == assessment_id)
        .order_by(AssessmentCharge.created_at)
    )
    return [AssessmentChargeResponse.model_validate(c) for c in result.scalars().all()]


@router.post(
    "/assessments/{assessment_id}/generate",
    response_model=GenerateAssessmentChargesResponse,
    status_code=status.HTTP_201_CREATED,
)
@audited(AuditAction.CREATE, "finance", path_param("assessment_id"),
         lambda request, body: f"Generated {body['generated']} assessment charges")
async def generate_assessment_charges(
    assessment_id: str,
    principal: Principal = Depends(require_permission(Permission.FINANCES_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    """
    Split the assessment total across units by ownership share.

    Raises:
        404: If the assessment does not exist
        400: NO_SHARES_ALLOCATED if no unit holds shares (nothing written)
    """
    run = await BillingService.generate_assessment_charges(db, assessment_id)

    return GenerateAssessmentChargesResponse(
        assessment_id=assessment_id,
        generated=run.generated,
        skipped=run.skipped,
        charges=[AssessmentChargeResponse.model_validate(c) for c in run.charges],
    )


@router.put("/assessment-charges/{charge_id}", response_model=AssessmentChargeResponse)
@audited(AuditAction.UPDATE, "finance", path_param("charge_id"),
         lambda request, body: f"Updated assessment charge {request.path_params['charge_id']} to {body['status']}")
async def update_assessment_charge(
    charge_id: str,
    update: ChargeUpdate,
    principal: Principal = Depends(require_permission(Permission.FINANCES_WRITE)),
    db: AsyncSession = Depends(get_db)
):
    charge = await db.get(AssessmentCharge, charge_id)
    if not charge:
        raise ResourceNotFoundError("Assessment charge", charge_id)

    _apply_charge_update(charge, update)
    await db.commit()
    await db.refresh(charge)

    return AssessmentChargeResponse.model_validate(charge)
