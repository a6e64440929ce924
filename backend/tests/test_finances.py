"""
Integration tests for charge generation and the finance routes.
"""

from datetime import date

import pytest
from sqlalchemy import delete, select, func
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import settings
from backend.app.models.assessment import AssessmentCharge
from backend.app.models.maintenance_charge import MaintenanceCharge
from backend.app.models.unit import Unit
from backend.app.services.audit import AuditFilter


async def create_unit(client, headers, **fields):
    payload = {"unit_number": fields.pop("unit_number", "1A"), **fields}
    response = await client.post("/v1/units", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()


async def create_assessment(client, headers, total_amount=50000, title="Roof replacement"):
    response = await client.post(
        "/v1/finances/assessments", json={"title": title, "total_amount": total_amount}, headers=headers
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_generate_recurring_charges_for_period(client, admin_headers, recorder):
    unit = await create_unit(client, admin_headers, monthly_maintenance=1800)

    response = await client.post(
        "/v1/finances/maintenance-charges/generate",
        json={"period_month": 3, "period_year": 2026},
        headers=admin_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["generated"] == 1
    assert data["skipped"] == 0
    [charge] = data["charges"]
    assert charge["unit_id"] == unit["id"]
    assert charge["amount"] == 1800
    assert charge["status"] == "pending"
    assert charge["due_date"] == "2026-03-01"

    await recorder.drain()
    [entry] = await recorder.query(AuditFilter(resource_type="finance"))
    assert entry.action == "CREATE"
    assert entry.resource_id is None
    assert entry.summary == "Generated charges for 3/2026"


@pytest.mark.asyncio
async def test_generate_skips_units_without_rate(client, admin_headers):
    await create_unit(client, admin_headers, unit_number="1A", monthly_maintenance=1800)
    await create_unit(client, admin_headers, unit_number="1B", monthly_maintenance=2400.5)
    await create_unit(client, admin_headers, unit_number="PH", status="sponsor")

    response = await client.post(
        "/v1/finances/maintenance-charges/generate",
        json={"period_month": 4, "period_year": 2026},
        headers=admin_headers,
    )

    data = response.json()
    assert data["generated"] == 2
    assert sorted(c["amount"] for c in data["charges"]) == [1800, 2400.5]


@pytest.mark.asyncio
async def test_regeneration_only_fills_gaps(client, admin_headers, db_session):
    await create_unit(client, admin_headers, unit_number="1A", monthly_maintenance=1800)
    period = {"period_month": 5, "period_year": 2026}

    first = await client.post("/v1/finances/maintenance-charges/generate", json=period, headers=admin_headers)
    assert first.json()["generated"] == 1

    await create_unit(client, admin_headers, unit_number="2A", monthly_maintenance=1950)
    second = await client.post("/v1/finances/maintenance-charges/generate", json=period, headers=admin_headers)

    assert second.status_code == 201
    assert second.json()["generated"] == 1
    assert second.json()["skipped"] == 1

    count = await db_session.execute(select(func.count(MaintenanceCharge.id)))
    assert count.scalar() == 2


@pytest.mark.asyncio
async def test_manual_duplicate_charge_conflicts(client, admin_headers):
    unit = await create_unit(client, admin_headers, monthly_maintenance=1800)
    payload = {"unit_id": unit["id"], "period_month": 6, "period_year": 2026, "amount": 1800}

    first = await client.post("/v1/finances/maintenance-charges", json=payload, headers=admin_headers)
    assert first.status_code == 201
    assert first.json()["due_date"] == "2026-06-01"

    second = await client.post("/v1/finances/maintenance-charges", json=payload, headers=admin_headers)
    assert second.status_code == 409
    assert second.json()["error_code"] == "CONFLICT"


@pytest.mark.asyncio
async def test_charge_listing_filters(client, admin_headers):
    unit = await create_unit(client, admin_headers, monthly_maintenance=1000)
    for month in (1, 2):
        await client.post(
            "/v1/finances/maintenance-charges/generate",
            json={"period_month": month, "period_year": 2026},
            headers=admin_headers,
        )

    all_charges = await client.get("/v1/finances/maintenance-charges", headers=admin_headers)
    assert [c["period_month"] for c in all_charges.json()] == [2, 1]

    february = await client.get(
        "/v1/finances/maintenance-charges",
        params={"unit_id": unit["id"], "period_year": 2026, "period_month": 2},
        headers=admin_headers,
    )
    assert len(february.json()) == 1

    paid = await client.get("/v1/finances/maintenance-charges", params={"status": "paid"}, headers=admin_headers)
    assert paid.json() == []


@pytest.mark.asyncio
async def test_mark_charge_paid_is_audited(client, admin_headers, recorder):
    await create_unit(client, admin_headers, monthly_maintenance=1800)
    generated = await client.post(
        "/v1/finances/maintenance-charges/generate",
        json={"period_month": 7, "period_year": 2026},
        headers=admin_headers,
    )
    charge_id = generated.json()["charges"][0]["id"]

    response = await client.put(
        f"/v1/finances/maintenance-charges/{charge_id}",
        json={"status": "paid", "paid_date": "2026-07-03"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["status"] == "paid"
    assert response.json()["paid_date"] == "2026-07-03"

    await recorder.drain()
    [entry] = await recorder.query(AuditFilter(resource_id=charge_id))
    assert entry.action == "UPDATE"
    assert entry.summary == f"Updated charge {charge_id} to paid"


@pytest.mark.asyncio
async def test_single_unit_assessment_takes_whole_total(client, admin_headers, recorder):
    unit = await create_unit(client, admin_headers, shares=250)
    assessment = await create_assessment(client, admin_headers, total_amount=50000)

    response = await client.post(f"/v1/finances/assessments/{assessment['id']}/generate", headers=admin_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["generated"] == 1
    [charge] = data["charges"]
    assert charge["unit_id"] == unit["id"]
    assert charge["amount"] == 50000.00

    listed = await client.get(f"/v1/finances/assessments/{assessment['id']}/charges", headers=admin_headers)
    assert [c["id"] for c in listed.json()] == [charge["id"]]

    await recorder.drain()
    trail = await recorder.query(AuditFilter(resource_id=assessment["id"]))
    assert [e.action for e in trail] == ["CREATE", "CREATE"]


@pytest.mark.asyncio
async def test_assessment_split_by_shares(client, admin_headers):
    for number, shares in (("1A", 100), ("2A", 200), ("3A", 700), ("SUPER", 0)):
        await create_unit(client, admin_headers, unit_number=number, shares=shares)
    assessment = await create_assessment(client, admin_headers, total_amount=1000)

    response = await client.post(f"/v1/finances/assessments/{assessment['id']}/generate", headers=admin_headers)

    data = response.json()
    assert data["generated"] == 3
    assert sorted(c["amount"] for c in data["charges"]) == [100.0, 200.0, 700.0]


@pytest.mark.asyncio
async def test_assessment_without_shares_writes_nothing(client, admin_headers, recorder, db_session):
    await create_unit(client, admin_headers, unit_number="1A", shares=0)
    assessment = await create_assessment(client, admin_headers)

    response = await client.post(f"/v1/finances/assessments/{assessment['id']}/generate", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error_code"] == "NO_SHARES_ALLOCATED"

    count = await db_session.execute(select(func.count(AssessmentCharge.id)))
    assert count.scalar() == 0

    await recorder.drain()
    trail = await recorder.query(AuditFilter(resource_id=assessment["id"]))
    # Only the assessment creation, not the failed generation
    assert len(trail) == 1


@pytest.mark.asyncio
async def test_assessment_regeneration_is_idempotent(client, admin_headers):
    await create_unit(client, admin_headers, unit_number="1A", shares=100)
    await create_unit(client, admin_headers, unit_number="1B", shares=100)
    assessment = await create_assessment(client, admin_headers, total_amount=300)
    url = f"/v1/finances/assessments/{assessment['id']}/generate"

    first = await client.post(url, headers=admin_headers)
    second = await client.post(url, headers=admin_headers)

    assert first.json()["generated"] == 2
    assert second.json()["generated"] == 0
    assert second.json()["skipped"] == 2


@pytest.mark.asyncio
async def test_unknown_assessment_is_not_found(client, admin_headers):
    response = await client.post("/v1/finances/assessments/missing/generate", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["error_code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_largest_remainder_mode_sums_to_total(client, admin_headers, monkeypatch):
    monkeypatch.setattr(settings, "assessment_rounding", "largest_remainder")
    for number in ("1A", "2A", "3A"):
        await create_unit(client, admin_headers, unit_number=number, shares=1)
    assessment = await create_assessment(client, admin_headers, total_amount=100)

    response = await client.post(f"/v1/finances/assessments/{assessment['id']}/generate", headers=admin_headers)

    amounts = [c["amount"] for c in response.json()["charges"]]
    assert round(sum(amounts), 2) == 100.00
    assert sorted(amounts) == [33.33, 33.33, 33.34]


@pytest.mark.asyncio
async def test_update_assessment_charge(client, admin_headers):
    await create_unit(client, admin_headers, shares=10)
    assessment = await create_assessment(client, admin_headers, total_amount=500)
    generated = await client.post(f"/v1/finances/assessments/{assessment['id']}/generate", headers=admin_headers)
    charge_id = generated.json()["charges"][0]["id"]

    response = await client.put(
        f"/v1/finances/assessment-charges/{charge_id}", json={"status": "paid"}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["status"] == "paid"
    assert response.json()["paid_date"] is not None


@pytest.mark.asyncio
async def test_residents_cannot_read_finances(client, resident_headers):
    response = await client.get("/v1/finances/assessments", headers=resident_headers)
    assert response.status_code == 403
    assert response.json()["details"]["required"] == "finances:read"


def commit_after(monkeypatch, rival_write):
    """Patch session commits so ``rival_write`` lands just before the next one."""
    real_commit = AsyncSession.commit

    async def commit(session):
        monkeypatch.setattr(AsyncSession, "commit", real_commit)
        await rival_write()
        await real_commit(session)

    monkeypatch.setattr(AsyncSession, "commit", commit)
    return real_commit


@pytest.mark.asyncio
async def test_concurrent_generation_conflicts_without_writing(client, admin_headers, db_session, recorder, monkeypatch):
    await create_unit(client, admin_headers, unit_number="1A", monthly_maintenance=1800)
    unit = await create_unit(client, admin_headers, unit_number="1B", monthly_maintenance=2000)

    async def rival_run():
        db_session.add(MaintenanceCharge(
            unit_id=unit["id"], period_month=7, period_year=2026, amount=2000, due_date=date(2026, 7, 1),
        ))
        await real_commit(db_session)

    real_commit = commit_after(monkeypatch, rival_run)

    response = await client.post(
        "/v1/finances/maintenance-charges/generate",
        json={"period_month": 7, "period_year": 2026},
        headers=admin_headers,
    )

    assert response.status_code == 409
    assert response.json()["error_code"] == "CONFLICT"
    assert "concurrently" in response.json()["message"]

    # Only the rival's charge exists; none of the losing run's rows were kept
    rows = (await db_session.execute(select(MaintenanceCharge.unit_id))).scalars().all()
    assert rows == [unit["id"]]

    await recorder.drain()
    assert await recorder.query(AuditFilter(resource_type="finance")) == []


@pytest.mark.asyncio
async def test_unit_deleted_mid_generation_reports_missing_unit(client, admin_headers, db_session, monkeypatch):
    await create_unit(client, admin_headers, unit_number="1A", shares=100)
    doomed = await create_unit(client, admin_headers, unit_number="1B", shares=100)
    assessment = await create_assessment(client, admin_headers, total_amount=1000)

    async def delete_unit():
        await db_session.execute(delete(Unit).where(Unit.id == doomed["id"]))
        await real_commit(db_session)

    real_commit = commit_after(monkeypatch, delete_unit)

    response = await client.post(f"/v1/finances/assessments/{assessment['id']}/generate", headers=admin_headers)

    assert response.status_code == 409
    assert "removed" in response.json()["message"]

    count = await db_session.execute(select(func.count(AssessmentCharge.id)))
    assert count.scalar() == 0
