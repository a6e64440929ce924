"""
Billing Service (Domain Logic).

Persists the output of the charge allocation engine.
Generation is idempotent per unit: a unit that already holds a charge for
the period (or the assessment) is skipped, so re-running only fills gaps.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import settings
from backend.app.core.exceptions import ConflictError, ResourceNotFoundError
from backend.app.core.logging_config import get_logger
from backend.app.domain.billing.allocation import (
    AssessmentTotal,
    BillingPeriod,
    UnitSnapshot,
    generate_assessment_charges,
    generate_recurring,
)
from backend.app.models.assessment import Assessment, AssessmentCharge
from backend.app.models.maintenance_charge import MaintenanceCharge
from backend.app.models.unit import Unit

logger = get_logger("billing")


@dataclass
class ChargeRun:
    """Rows inserted by one generation call and how many units were skipped."""
    charges: List = field(default_factory=list)
    skipped: int = 0

    @property
    def generated(self) -> int:
        return len(self.charges)


def _is_foreign_key_violation(exc: IntegrityError) -> bool:
    # sqlite: "FOREIGN KEY constraint failed"; postgres: "violates foreign key constraint"
    return "foreign key" in str(exc.orig).lower()


def _snapshot(unit: Unit) -> UnitSnapshot:
    rate = unit.monthly_maintenance
    return UnitSnapshot(
        unit_id=unit.id,
        recurring_rate=Decimal(str(rate)) if rate is not None else None,
        shares=unit.shares or 0,
    )


class BillingService:

    @staticmethod
    async def _load_units(db: AsyncSession) -> Sequence[Unit]:
        result = await db.execute(select(Unit).order_by(Unit.unit_number, Unit.id))
        return result.scalars().all()

    @staticmethod
    async def _commit_run(db: AsyncSession, rows: List, conflict_message: str) -> None:
        db.add_all(rows)
        try:
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            if _is_foreign_key_violation(exc):
                # A unit was deleted after the snapshot was taken
                logger.warning("Charge generation lost a unit mid-run: %s", exc.orig)
                raise ConflictError("A unit was removed while charges were being generated; retry the run")
            # A concurrent generation inserted the same charges first
            logger.warning("Charge generation collided with a concurrent run: %s", exc.orig)
            raise ConflictError(conflict_message)
        for row in rows:
            await db.refresh(row)

    @staticmethod
    async def generate_maintenance_charges(db: AsyncSession, period: BillingPeriod) -> ChargeRun:
        """
        Generate the recurring maintenance charges for a billing period.

        Flow:
        1. Snapshot all units
        2. Run flat recurring generation
        3. Drop units already charged for the period
        4. Insert and commit in one transaction

        Args:
            db: Database session
            period: Billing month and year

        Returns:
            ChargeRun with the inserted MaintenanceCharge rows
        """
        units = await BillingService._load_units(db)
        result = generate_recurring(period, [_snapshot(u) for u in units])

        existing = await db.execute(
            select(MaintenanceCharge.unit_id).where(
                MaintenanceCharge.period_month == period.month,
                MaintenanceCharge.period_year == period.year,
            )
        )
        already_charged = set(existing.scalars().all())

        rows = [
            MaintenanceCharge(
                unit_id=charge.unit_id,
                period_month=charge.period_month,
                period_year=charge.period_year,
                amount=charge.amount,
                status=charge.status,
                due_date=charge.due_date,
            )
            for charge in result.charges
            if charge.unit_id not in already_charged
        ]
        skipped = result.generated - len(rows)

        await BillingService._commit_run(db, rows, f"Charges for {period.label} are being generated concurrently")

        logger.info(
            "Generated maintenance charges period=%s generated=%d skipped=%d",
            period.label, len(rows), skipped,
        )
        return ChargeRun(charges=rows, skipped=skipped)

    @staticmethod
    async def generate_assessment_charges(db: AsyncSession, assessment_id: str) -> ChargeRun:
        """
        Distribute an assessment across units by ownership share.

        Raises:
            ResourceNotFoundError if the assessment does not exist
            NoSharesAllocatedError if no unit holds shares (nothing written)
            InvalidAssessmentError if the total is not positive
        """
        assessment = await db.get(Assessment, assessment_id)
        if not assessment:
            raise ResourceNotFoundError("Assessment", assessment_id)

        units = await BillingService._load_units(db)
        result = generate_assessment_charges(
            AssessmentTotal(assessment_id=assessment.id, total_amount=Decimal(str(assessment.total_amount))),
            [_snapshot(u) for u in units],
            places=settings.currency_minor_places,
            rounding=settings.assessment_rounding,
        )

        existing = await db.execute(
            select(AssessmentCharge.unit_id).where(AssessmentCharge.assessment_id == assessment.id)
        )
        already_charged = set(existing.scalars().all())

        rows = [
            AssessmentCharge(
                assessment_id=charge.assessment_id,
                unit_id=charge.unit_id,
                amount=charge.amount,
                status=charge.status,
            )
            for charge in result.charges
            if charge.unit_id not in already_charged
        ]
        skipped = result.generated - len(rows)

        await BillingService._commit_run(db, rows, f"Assessment {assessment.id} is being distributed concurrently")

        logger.info(
            "Generated assessment charges assessment=%s generated=%d skipped=%d",
            assessment.id, len(rows), skipped,
        )
        return ChargeRun(charges=rows, skipped=skipped)
