"""
Vehicle register tests: creation, uniqueness, edits, deletion.
"""

import pytest

from fleetflow.app.models.enums import UserRole


@pytest.mark.asyncio
async def test_register_vehicle_defaults(client, manager_headers):
    response = await client.post("/v1/vehicles", json={
        "name": "Van One",
        "license_plate": "VAN-001",
        "vehicle_type": "Van",
        "max_capacity": 800,
        "acquisition_cost": 30000
    }, headers=manager_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "Available"
    assert data["odometer"] == 0
    assert data["vehicle_type"] == "Van"


@pytest.mark.asyncio
async def test_duplicate_plate_rejected(client, manager_headers, make_vehicle):
    await make_vehicle(license_plate="DUP-1")

    response = await client.post("/v1/vehicles", json={
        "name": "Copy",
        "license_plate": "DUP-1",
        "vehicle_type": "Truck",
        "max_capacity": 500,
        "acquisition_cost": 1000
    }, headers=manager_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "ERR_VALIDATION_001"
    assert body["message"] == "Vehicle with this license plate already exists"

    listing = await client.get("/v1/vehicles", headers=manager_headers)
    assert len(listing.json()) == 1


@pytest.mark.asyncio
async def test_invalid_payload_is_schema_error(client, manager_headers):
    response = await client.post("/v1/vehicles", json={
        "name": "Bad",
        "license_plate": "BAD-1",
        "vehicle_type": "Spaceship",
        "max_capacity": -1,
        "acquisition_cost": 0
    }, headers=manager_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_plate_to_taken_plate_rejected(client, manager_headers, make_vehicle):
    first = await make_vehicle(license_plate="AAA-1")
    await make_vehicle(license_plate="BBB-2")

    response = await client.put(
        f"/v1/vehicles/{first['id']}", json={"license_plate": "BBB-2"}, headers=manager_headers
    )
    assert response.status_code == 400
    assert response.json()["message"] == "License plate already in use"

    unchanged = await client.get(f"/v1/vehicles/{first['id']}", headers=manager_headers)
    assert unchanged.json()["license_plate"] == "AAA-1"


@pytest.mark.asyncio
async def test_update_keeps_own_plate_and_merges_fields(client, manager_headers, make_vehicle):
    vehicle = await make_vehicle(license_plate="OWN-1", name="Old Name")

    response = await client.put(
        f"/v1/vehicles/{vehicle['id']}",
        json={"license_plate": "OWN-1", "name": "New Name"},
        headers=manager_headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "New Name"
    assert data["max_capacity"] == vehicle["max_capacity"]


@pytest.mark.asyncio
async def test_update_status_directly(client, manager_headers, make_vehicle):
    vehicle = await make_vehicle()

    response = await client.put(
        f"/v1/vehicles/{vehicle['id']}", json={"status": "Retired"}, headers=manager_headers
    )
    assert response.status_code == 200
    assert response.json()["status"] == "Retired"


@pytest.mark.asyncio
async def test_list_filters_by_status(client, manager_headers, make_vehicle):
    await make_vehicle()
    await make_vehicle(status="InShop")

    response = await client.get("/v1/vehicles", params={"status": "InShop"}, headers=manager_headers)
    assert response.status_code == 200
    assert [v["status"] for v in response.json()] == ["InShop"]


@pytest.mark.asyncio
async def test_get_unknown_vehicle_is_404(client, manager_headers):
    response = await client.get("/v1/vehicles/4242", headers=manager_headers)
    assert response.status_code == 404
    assert response.json()["error_code"] == "ERR_NOT_FOUND_001"


@pytest.mark.asyncio
async def test_delete_unreferenced_vehicle(client, manager_headers, make_vehicle):
    vehicle = await make_vehicle()

    response = await client.delete(f"/v1/vehicles/{vehicle['id']}", headers=manager_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Vehicle deleted"

    response = await client.get(f"/v1/vehicles/{vehicle['id']}", headers=manager_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_vehicle_with_trip_history_rejected(
    client, manager_headers, make_vehicle, make_driver, dispatch_trip
):
    vehicle = await make_vehicle()
    driver = await make_driver()
    assert (await dispatch_trip(vehicle["id"], driver["id"])).status_code == 201

    response = await client.delete(f"/v1/vehicles/{vehicle['id']}", headers=manager_headers)
    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "ERR_CONFLICT_001"
    assert body["details"]["trips"] == 1


@pytest.mark.asyncio
async def test_dispatcher_can_register_vehicle(client, auth_headers):
    response = await client.post("/v1/vehicles", json={
        "name": "Bike",
        "license_plate": "BK-1",
        "vehicle_type": "Bike",
        "max_capacity": 20,
        "acquisition_cost": 900
    }, headers=auth_headers[UserRole.DISPATCHER])
    assert response.status_code == 201
