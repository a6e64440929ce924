"""
Unit tests for the charge allocation engine.
"""

from datetime import date
from decimal import Decimal

import pytest

from backend.app.core.exceptions import InvalidAssessmentError, NoSharesAllocatedError
from backend.app.domain.billing.allocation import (
    AssessmentTotal,
    BillingPeriod,
    UnitSnapshot,
    generate_assessment_charges,
    generate_recurring,
    round_to_minor_unit,
)


def assessment(total):
    return AssessmentTotal(assessment_id="a-1", total_amount=Decimal(total))


# Flat recurring generation

def test_recurring_emits_one_charge_per_rated_unit():
    units = [
        UnitSnapshot("u-1", Decimal("1800.00")),
        UnitSnapshot("u-2", Decimal("2150.50")),
        UnitSnapshot("u-3", None),
        UnitSnapshot("u-4", Decimal("0")),
    ]
    result = generate_recurring(BillingPeriod(3, 2026), units)

    assert result.generated == 2
    amounts = {c.unit_id: c.amount for c in result.charges}
    assert amounts == {"u-1": Decimal("1800.00"), "u-2": Decimal("2150.50")}


def test_recurring_charge_fields():
    [charge] = generate_recurring(BillingPeriod(3, 2026), [UnitSnapshot("u-1", Decimal("1800"))]).charges
    assert charge.period_month == 3
    assert charge.period_year == 2026
    assert charge.status == "pending"
    assert charge.due_date == date(2026, 3, 1)


def test_recurring_with_no_rated_units_is_empty():
    result = generate_recurring(BillingPeriod(12, 2025), [UnitSnapshot("u-1")])
    assert result.generated == 0
    assert result.charges == []


def test_recurring_is_not_deduplicated_by_the_engine():
    units = [UnitSnapshot("u-1", Decimal("100"))]
    first = generate_recurring(BillingPeriod(1, 2026), units)
    second = generate_recurring(BillingPeriod(1, 2026), units)
    assert first.generated == second.generated == 1


@pytest.mark.parametrize("month", [0, 13])
def test_period_rejects_invalid_month(month):
    with pytest.raises(ValueError):
        BillingPeriod(month, 2026)


def test_period_label():
    assert BillingPeriod(4, 2026).label == "4/2026"


# Proportional assessment distribution

def test_assessment_split_by_shares():
    units = [UnitSnapshot("u-1", shares=100), UnitSnapshot("u-2", shares=200), UnitSnapshot("u-3", shares=700)]
    result = generate_assessment_charges(assessment("1000.00"), units)

    amounts = {c.unit_id: c.amount for c in result.charges}
    assert amounts == {"u-1": Decimal("100.00"), "u-2": Decimal("200.00"), "u-3": Decimal("700.00")}
    assert amounts["u-3"] >= amounts["u-2"] >= amounts["u-1"]
    assert result.generated == 3
    assert all(c.status == "pending" and c.assessment_id == "a-1" for c in result.charges)


def test_zero_share_unit_gets_no_charge():
    units = [
        UnitSnapshot("u-1", shares=100), UnitSnapshot("u-2", shares=200),
        UnitSnapshot("u-3", shares=700), UnitSnapshot("u-4", shares=0),
    ]
    result = generate_assessment_charges(assessment("1000.00"), units)
    assert "u-4" not in {c.unit_id for c in result.charges}
    assert result.generated == 3


def test_single_unit_takes_the_whole_total():
    result = generate_assessment_charges(assessment("50000"), [UnitSnapshot("u-1", shares=250)])
    [charge] = result.charges
    assert charge.amount == Decimal("50000.00")


def test_all_zero_shares_is_rejected():
    units = [UnitSnapshot("u-1", shares=0), UnitSnapshot("u-2", shares=0)]
    with pytest.raises(NoSharesAllocatedError) as exc_info:
        generate_assessment_charges(assessment("1000"), units)
    assert exc_info.value.error_code == "NO_SHARES_ALLOCATED"
    assert exc_info.value.status_code == 400


def test_no_units_is_rejected():
    with pytest.raises(NoSharesAllocatedError):
        generate_assessment_charges(assessment("1000"), [])


@pytest.mark.parametrize("total", ["0", "-10.00"])
def test_non_positive_total_is_rejected(total):
    with pytest.raises(InvalidAssessmentError):
        generate_assessment_charges(assessment(total), [UnitSnapshot("u-1", shares=1)])


def test_independent_rounding_rounds_half_up_per_unit():
    # 100 / 3 = 33.333... each; sum drifts by one cent
    units = [UnitSnapshot(f"u-{i}", shares=1) for i in range(3)]
    result = generate_assessment_charges(assessment("100.00"), units)

    assert [c.amount for c in result.charges] == [Decimal("33.33")] * 3
    total = sum(c.amount for c in result.charges)
    assert abs(total - Decimal("100.00")) <= Decimal("0.01") * len(units) / 2


def test_independent_rounding_half_up_on_exact_half_cent():
    # 0.05 / 2 = 0.025 -> 0.03
    units = [UnitSnapshot("u-1", shares=1), UnitSnapshot("u-2", shares=1)]
    result = generate_assessment_charges(assessment("0.05"), units)
    assert [c.amount for c in result.charges] == [Decimal("0.03"), Decimal("0.03")]


def test_largest_remainder_sums_exactly_to_total():
    units = [UnitSnapshot(f"u-{i}", shares=1) for i in range(3)]
    result = generate_assessment_charges(assessment("100.00"), units, rounding="largest_remainder")

    amounts = [c.amount for c in result.charges]
    assert sum(amounts) == Decimal("100.00")
    # Tie on remainders: the extra cent goes to the first unit
    assert amounts == [Decimal("33.34"), Decimal("33.33"), Decimal("33.33")]


def test_largest_remainder_favours_biggest_fraction():
    # exact shares: 14.2857.., 28.5714.., 57.1428..
    units = [UnitSnapshot("u-1", shares=1), UnitSnapshot("u-2", shares=2), UnitSnapshot("u-3", shares=4)]
    result = generate_assessment_charges(assessment("100.00"), units, rounding="largest_remainder")

    amounts = {c.unit_id: c.amount for c in result.charges}
    assert sum(amounts.values()) == Decimal("100.00")
    assert amounts == {"u-1": Decimal("14.29"), "u-2": Decimal("28.57"), "u-3": Decimal("57.14")}


def test_unknown_rounding_mode():
    with pytest.raises(ValueError):
        generate_assessment_charges(assessment("10"), [UnitSnapshot("u-1", shares=1)], rounding="bankers")


def test_minor_unit_places_are_configurable():
    assert round_to_minor_unit(Decimal("10.5"), places=0) == Decimal("11")
    units = [UnitSnapshot(f"u-{i}", shares=1) for i in range(3)]
    result = generate_assessment_charges(assessment("1000"), units, places=0)
    assert [c.amount for c in result.charges] == [Decimal("333")] * 3
