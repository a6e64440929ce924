"""
Integration tests for units, residents, maintenance requests and documents.
"""

import pytest


@pytest.mark.asyncio
async def test_resident_can_read_but_not_write_units(client, admin_headers, resident_headers):
    created = await client.post(
        "/v1/units",
        json={"unit_number": "5C", "floor": 5, "rooms": 3.5, "shares": 420, "monthly_maintenance": 2100},
        headers=admin_headers,
    )
    assert created.status_code == 201
    unit = created.json()
    assert unit["status"] == "occupied"
    assert unit["rooms"] == 3.5

    listing = await client.get("/v1/units", headers=resident_headers)
    assert [u["unit_number"] for u in listing.json()] == ["5C"]

    response = await client.put(f"/v1/units/{unit['id']}", json={"shares": 1}, headers=resident_headers)
    assert response.status_code == 403
    assert response.json()["details"]["required"] == "units:write"


@pytest.mark.asyncio
async def test_units_filter_by_building(client, admin_headers):
    await client.post("/v1/units", json={"unit_number": "1A", "building_id": "b-1"}, headers=admin_headers)
    await client.post("/v1/units", json={"unit_number": "1A", "building_id": "b-2"}, headers=admin_headers)

    response = await client.get("/v1/units", params={"building_id": "b-2"}, headers=admin_headers)
    assert [u["building_id"] for u in response.json()] == ["b-2"]


@pytest.mark.asyncio
async def test_unit_residents_and_cascade(client, admin_headers):
    unit = (await client.post("/v1/units", json={"unit_number": "2B"}, headers=admin_headers)).json()
    for first, primary in (("Ann", True), ("Ben", False)):
        await client.post(
            "/v1/residents",
            json={"unit_id": unit["id"], "first_name": first, "last_name": "Lee", "is_primary": primary},
            headers=admin_headers,
        )

    residents = await client.get(f"/v1/units/{unit['id']}/residents", headers=admin_headers)
    assert [r["first_name"] for r in residents.json()] == ["Ann", "Ben"]

    assert (await client.delete(f"/v1/units/{unit['id']}", headers=admin_headers)).status_code == 204
    assert (await client.get(f"/v1/units/{unit['id']}", headers=admin_headers)).status_code == 404
    assert (await client.get("/v1/residents", headers=admin_headers)).json() == []


@pytest.mark.asyncio
async def test_resident_filters_and_update(client, admin_headers):
    tenant = (await client.post(
        "/v1/residents", json={"first_name": "Tia", "last_name": "Ng", "role": "tenant"}, headers=admin_headers
    )).json()
    await client.post("/v1/residents", json={"first_name": "Sam", "last_name": "Ode"}, headers=admin_headers)

    tenants = await client.get("/v1/residents", params={"role": "tenant"}, headers=admin_headers)
    assert [r["id"] for r in tenants.json()] == [tenant["id"]]

    updated = await client.put(
        f"/v1/residents/{tenant['id']}", json={"role": "occupant", "phone": "555-0101"}, headers=admin_headers
    )
    assert updated.json()["role"] == "occupant"
    assert updated.json()["phone"] == "555-0101"


@pytest.mark.asyncio
async def test_maintenance_request_lifecycle(client, admin_headers, resident_headers):
    submitted = await client.post(
        "/v1/maintenance", json={"title": "No hot water", "category": "plumbing"}, headers=resident_headers
    )
    assert submitted.status_code == 201
    request = submitted.json()
    assert request["status"] == "open"
    assert request["priority"] == "normal"

    assigned = await client.put(
        f"/v1/maintenance/{request['id']}",
        json={"status": "in_progress", "assigned_to": "Acme Plumbing"},
        headers=admin_headers,
    )
    assert assigned.json()["assigned_to"] == "Acme Plumbing"
    assert assigned.json()["resolved_at"] is None

    open_requests = await client.get("/v1/maintenance", params={"status": "open"}, headers=resident_headers)
    assert open_requests.json() == []


@pytest.mark.asyncio
async def test_documents(client, admin_headers, resident_headers, admin_user):
    created = await client.post(
        "/v1/documents",
        json={"title": "2025 Financial Statement", "category": "financial", "file_url": "https://files.test/fs.pdf"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    document = created.json()
    assert document["uploaded_by"] == admin_user.id

    forbidden = await client.post("/v1/documents", json={"title": "Flyer"}, headers=resident_headers)
    assert forbidden.status_code == 403

    financial = await client.get("/v1/documents", params={"category": "financial"}, headers=resident_headers)
    assert [d["id"] for d in financial.json()] == [document["id"]]

    assert (await client.delete(f"/v1/documents/{document['id']}", headers=admin_headers)).status_code == 204
    assert (await client.get(f"/v1/documents/{document['id']}", headers=resident_headers)).status_code == 404


@pytest.mark.asyncio
async def test_null_for_required_unit_fields_is_rejected(client, admin_headers):
    unit = (await client.post(
        "/v1/units", json={"unit_number": "3D", "shares": 250}, headers=admin_headers
    )).json()

    for field in ("shares", "unit_number", "status"):
        response = await client.put(f"/v1/units/{unit['id']}", json={field: None}, headers=admin_headers)
        assert response.status_code == 422, field
        assert response.json()["error_code"] == "ERR_VALIDATION"

    # Nullable fields still clear
    cleared = await client.put(f"/v1/units/{unit['id']}", json={"floor": None}, headers=admin_headers)
    assert cleared.status_code == 200

    current = (await client.get(f"/v1/units/{unit['id']}", headers=admin_headers)).json()
    assert current["shares"] == 250
    assert current["unit_number"] == "3D"


@pytest.mark.asyncio
async def test_null_for_required_resident_fields_is_rejected(client, admin_headers):
    resident = (await client.post(
        "/v1/residents", json={"first_name": "Ada", "last_name": "Ruiz"}, headers=admin_headers
    )).json()

    for field in ("first_name", "last_name", "role", "is_primary"):
        response = await client.put(f"/v1/residents/{resident['id']}", json={field: None}, headers=admin_headers)
        assert response.status_code == 422, field

    current = (await client.get(f"/v1/residents/{resident['id']}", headers=admin_headers)).json()
    assert current["first_name"] == "Ada"


@pytest.mark.asyncio
async def test_resident_with_unknown_unit_is_not_found(client, admin_headers):
    created = await client.post(
        "/v1/residents", json={"first_name": "A", "last_name": "B", "unit_id": "nope"}, headers=admin_headers
    )
    assert created.status_code == 404
    assert created.json()["error_code"] == "NOT_FOUND"
    assert (await client.get("/v1/residents", headers=admin_headers)).json() == []

    resident = (await client.post(
        "/v1/residents", json={"first_name": "A", "last_name": "B"}, headers=admin_headers
    )).json()
    moved = await client.put(f"/v1/residents/{resident['id']}", json={"unit_id": "nope"}, headers=admin_headers)
    assert moved.status_code == 404

    detached = await client.put(f"/v1/residents/{resident['id']}", json={"unit_id": None}, headers=admin_headers)
    assert detached.status_code == 200


@pytest.mark.asyncio
async def test_maintenance_request_with_unknown_references_is_not_found(client, resident_headers):
    unknown_unit = await client.post(
        "/v1/maintenance", json={"title": "Leak", "unit_id": "nope"}, headers=resident_headers
    )
    assert unknown_unit.status_code == 404

    unknown_resident = await client.post(
        "/v1/maintenance", json={"title": "Leak", "submitted_by": "nobody"}, headers=resident_headers
    )
    assert unknown_resident.status_code == 404
    assert "Resident" in unknown_resident.json()["message"]
