"""
Charge Allocation Engine (pure domain logic).

Two independent computations over a snapshot of units:

- flat recurring generation: one charge per rated unit for a period
- proportional assessment distribution: an assessment total split by
  ownership share

Neither touches the database nor checks for charges generated earlier;
the billing service owns persistence and idempotency.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from typing import Generic, Iterable, List, Optional, Sequence, TypeVar

from backend.app.core.exceptions import InvalidAssessmentError, NoSharesAllocatedError
from backend.app.models.enums import ChargeStatus

T = TypeVar("T")

ROUNDING_INDEPENDENT = "independent"
ROUNDING_LARGEST_REMAINDER = "largest_remainder"


@dataclass(frozen=True)
class BillingPeriod:
    """Calendar month a recurring charge covers."""
    month: int
    year: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"period month must be 1-12, got {self.month}")

    @property
    def due_date(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def label(self) -> str:
        return f"{self.month}/{self.year}"


@dataclass(frozen=True)
class UnitSnapshot:
    """The fields of a unit charge generation reads."""
    unit_id: str
    recurring_rate: Optional[Decimal] = None
    shares: int = 0


@dataclass(frozen=True)
class AssessmentTotal:
    assessment_id: str
    total_amount: Decimal


@dataclass(frozen=True)
class RecurringCharge:
    unit_id: str
    period_month: int
    period_year: int
    amount: Decimal
    due_date: date
    status: str = ChargeStatus.PENDING.value


@dataclass(frozen=True)
class ProportionalCharge:
    assessment_id: str
    unit_id: str
    amount: Decimal
    status: str = ChargeStatus.PENDING.value


@dataclass(frozen=True)
class GenerationResult(Generic[T]):
    """Generated charges plus their count, same shape for both paths."""
    charges: List[T] = field(default_factory=list)

    @property
    def generated(self) -> int:
        return len(self.charges)


def minor_unit(places: int = 2) -> Decimal:
    """Smallest currency increment for ``places`` decimal places."""
    return Decimal(1).scaleb(-places)


def round_to_minor_unit(amount: Decimal, places: int = 2) -> Decimal:
    return Decimal(amount).quantize(minor_unit(places), rounding=ROUND_HALF_UP)


def generate_recurring(period: BillingPeriod, units: Iterable[UnitSnapshot]) -> GenerationResult[RecurringCharge]:
    """
    Emit one pending charge per unit with a configured recurring rate.

    Units without a rate (None or zero) are skipped silently. The amount
    is the unit's rate as given; calling twice yields two sets of charges.
    """
    charges = [
        RecurringCharge(
            unit_id=unit.unit_id,
            period_month=period.month,
            period_year=period.year,
            amount=Decimal(unit.recurring_rate),
            due_date=period.due_date,
        )
        for unit in units
        if unit.recurring_rate
    ]
    return GenerationResult(charges=charges)


def generate_assessment_charges(
    assessment: AssessmentTotal,
    units: Sequence[UnitSnapshot],
    places: int = 2,
    rounding: str = ROUNDING_INDEPENDENT,
) -> GenerationResult[ProportionalCharge]:
    """
    Split an assessment total across units in proportion to their shares.

    Args:
        assessment: Assessment id and positive total
        units: Unit snapshots; units with zero shares get no charge
        places: Currency minor-unit places (2 for cents)
        rounding: ``independent`` rounds each share half-up on its own, so
            the sum may drift from the total by up to half a minor unit
            per charge. ``largest_remainder`` truncates each share and
            hands the leftover minor units to the largest remainders, so
            the sum equals the total exactly.

    Raises:
        InvalidAssessmentError if the total is not positive
        NoSharesAllocatedError if the units hold no shares at all
    """
    total = Decimal(assessment.total_amount)
    if total <= 0:
        raise InvalidAssessmentError()

    total_shares = sum(unit.shares or 0 for unit in units)
    if total_shares == 0:
        raise NoSharesAllocatedError()

    charged = [unit for unit in units if unit.shares and unit.shares > 0]
    exact = [total * unit.shares / total_shares for unit in charged]

    if rounding == ROUNDING_LARGEST_REMAINDER:
        amounts = _largest_remainder(round_to_minor_unit(total, places), exact, places)
    elif rounding == ROUNDING_INDEPENDENT:
        amounts = [round_to_minor_unit(value, places) for value in exact]
    else:
        raise ValueError(f"unknown rounding mode: {rounding}")

    charges = [
        ProportionalCharge(assessment_id=assessment.assessment_id, unit_id=unit.unit_id, amount=amount)
        for unit, amount in zip(charged, amounts)
    ]
    return GenerationResult(charges=charges)


def _largest_remainder(total: Decimal, exact: List[Decimal], places: int) -> List[Decimal]:
    step = minor_unit(places)
    floors = [value.quantize(step, rounding=ROUND_DOWN) for value in exact]
    leftover = int((total - sum(floors, Decimal(0))) / step)

    # Stable: ties go to the earlier unit
    by_remainder = sorted(range(len(exact)), key=lambda i: exact[i] - floors[i], reverse=True)
    for i in by_remainder[:leftover]:
        floors[i] += step
    return floors
