"""
Maintenance and expense tests.

Service logs drive the vehicle into and out of the shop and book a linked
expense; standalone expenses follow their own rules.
"""

import pytest

from fleetflow.app.core.config import settings
from fleetflow.app.models.enums import UserRole


async def _vehicle(client, headers, vehicle_id):
    return (await client.get(f"/v1/vehicles/{vehicle_id}", headers=headers)).json()


async def _open_log(client, headers, vehicle_id, cost=1200, **extra):
    payload = {
        "vehicle_id": vehicle_id,
        "maintenance_type": "Preventive",
        "description": "Oil change",
        "cost": cost,
    }
    payload.update(extra)
    return await client.post("/v1/maintenance", json=payload, headers=headers)


@pytest.mark.asyncio
async def test_open_log_sends_vehicle_to_shop_and_books_expense(client, manager_headers, make_vehicle):
    vehicle = await make_vehicle(odometer=2500)

    response = await _open_log(client, manager_headers, vehicle["id"], notes="Front axle")
    assert response.status_code == 201
    log = response.json()
    assert log["status"] == "InProgress"
    assert log["odometer_at_service"] == 2500
    assert log["notes"] == "Front axle"
    assert log["vehicle"]["id"] == vehicle["id"]

    assert (await _vehicle(client, manager_headers, vehicle["id"]))["status"] == "InShop"

    expenses = (await client.get("/v1/expenses", headers=manager_headers)).json()
    assert len(expenses) == 1
    assert expenses[0]["expense_type"] == "Maintenance"
    assert expenses[0]["cost"] == 1200
    assert expenses[0]["liters"] == 0
    assert expenses[0]["maintenance_id"] == log["id"]


@pytest.mark.asyncio
async def test_open_log_zero_odometer_uses_vehicle_reading(client, manager_headers, make_vehicle):
    vehicle = await make_vehicle(odometer=5000)

    zero = (await _open_log(client, manager_headers, vehicle["id"], odometer_at_service=0)).json()
    assert zero["odometer_at_service"] == 5000

    other = await make_vehicle(odometer=5000)
    given = (await _open_log(client, manager_headers, other["id"], odometer_at_service=4800)).json()
    assert given["odometer_at_service"] == 4800


@pytest.mark.asyncio
async def test_open_log_for_vehicle_on_trip_rejected(
    client, manager_headers, make_vehicle, make_driver, dispatch_trip
):
    vehicle = await make_vehicle()
    driver = await make_driver()
    await dispatch_trip(vehicle["id"], driver["id"])

    response = await _open_log(client, manager_headers, vehicle["id"])
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot schedule maintenance for a vehicle currently on a trip"
    assert (await client.get("/v1/expenses", headers=manager_headers)).json() == []


@pytest.mark.asyncio
async def test_open_log_unknown_vehicle(client, manager_headers):
    response = await _open_log(client, manager_headers, 31337)
    assert response.status_code == 400
    assert response.json()["message"] == "Vehicle not found"


@pytest.mark.asyncio
async def test_complete_log_releases_vehicle(client, manager_headers, make_vehicle):
    vehicle = await make_vehicle()
    log = (await _open_log(client, manager_headers, vehicle["id"])).json()

    response = await client.put(
        f"/v1/maintenance/{log['id']}/complete",
        json={"notes": "Done", "cost": 1500},
        headers=manager_headers
    )
    assert response.status_code == 200
    completed = response.json()
    assert completed["status"] == "Completed"
    assert completed["completed_date"] is not None
    assert completed["notes"] == "Done"
    assert completed["cost"] == 1500

    assert (await _vehicle(client, manager_headers, vehicle["id"]))["status"] == "Available"

    # The booked expense keeps the original cost
    expenses = (await client.get("/v1/expenses", headers=manager_headers)).json()
    assert expenses[0]["cost"] == 1200


@pytest.mark.asyncio
async def test_complete_log_syncs_expense_cost_when_enabled(client, manager_headers, make_vehicle, monkeypatch):
    monkeypatch.setattr(settings, "sync_maintenance_expense_cost", True)
    vehicle = await make_vehicle()
    log = (await _open_log(client, manager_headers, vehicle["id"])).json()

    await client.put(f"/v1/maintenance/{log['id']}/complete", json={"cost": 1500}, headers=manager_headers)

    expenses = (await client.get("/v1/expenses", headers=manager_headers)).json()
    assert expenses[0]["cost"] == 1500


@pytest.mark.asyncio
async def test_complete_log_without_body(client, manager_headers, make_vehicle):
    vehicle = await make_vehicle()
    log = (await _open_log(client, manager_headers, vehicle["id"], notes="keep")).json()

    response = await client.put(f"/v1/maintenance/{log['id']}/complete", headers=manager_headers)
    assert response.status_code == 200
    assert response.json()["notes"] == "keep"
    assert response.json()["cost"] == 1200


@pytest.mark.asyncio
async def test_complete_log_with_zero_cost_keeps_booked_cost(client, manager_headers, make_vehicle, monkeypatch):
    monkeypatch.setattr(settings, "sync_maintenance_expense_cost", True)
    vehicle = await make_vehicle()
    log = (await _open_log(client, manager_headers, vehicle["id"], cost=300)).json()

    response = await client.put(
        f"/v1/maintenance/{log['id']}/complete", json={"cost": 0}, headers=manager_headers
    )
    assert response.status_code == 200
    assert response.json()["status"] == "Completed"
    assert response.json()["cost"] == 300

    expenses = (await client.get("/v1/expenses", headers=manager_headers)).json()
    assert expenses[0]["cost"] == 300


@pytest.mark.asyncio
async def test_complete_log_does_not_clobber_retired_vehicle(client, manager_headers, make_vehicle):
    vehicle = await make_vehicle()
    log = (await _open_log(client, manager_headers, vehicle["id"])).json()
    await client.put(f"/v1/vehicles/{vehicle['id']}", json={"status": "Retired"}, headers=manager_headers)

    await client.put(f"/v1/maintenance/{log['id']}/complete", headers=manager_headers)
    assert (await _vehicle(client, manager_headers, vehicle["id"]))["status"] == "Retired"


@pytest.mark.asyncio
async def test_complete_log_twice_rejected(client, manager_headers, make_vehicle):
    vehicle = await make_vehicle()
    log = (await _open_log(client, manager_headers, vehicle["id"])).json()
    path = f"/v1/maintenance/{log['id']}/complete"
    await client.put(path, headers=manager_headers)

    response = await client.put(path, json={"notes": "again"}, headers=manager_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Maintenance already completed"

    current = (await client.get(f"/v1/maintenance/{log['id']}", headers=manager_headers)).json()
    assert current["notes"] == ""


@pytest.mark.asyncio
async def test_delete_open_log_releases_vehicle(client, manager_headers, make_vehicle):
    vehicle = await make_vehicle()
    log = (await _open_log(client, manager_headers, vehicle["id"])).json()

    response = await client.delete(f"/v1/maintenance/{log['id']}", headers=manager_headers)
    assert response.status_code == 200
    assert (await _vehicle(client, manager_headers, vehicle["id"]))["status"] == "Available"
    assert (await client.get(f"/v1/maintenance/{log['id']}", headers=manager_headers)).status_code == 404

    expenses = (await client.get("/v1/expenses", headers=manager_headers)).json()
    assert len(expenses) == 1
    assert expenses[0]["maintenance_id"] is None


@pytest.mark.asyncio
async def test_delete_unknown_log_is_404(client, manager_headers):
    response = await client.delete("/v1/maintenance/5", headers=manager_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_maintenance_filters_and_summary(client, manager_headers, make_vehicle):
    first = await make_vehicle()
    second = await make_vehicle()
    log = (await _open_log(client, manager_headers, first["id"], cost=100)).json()
    await client.put(f"/v1/maintenance/{log['id']}/complete", headers=manager_headers)
    await _open_log(client, manager_headers, first["id"], cost=50, maintenance_type="Reactive")
    await _open_log(client, manager_headers, second["id"], cost=300)

    by_vehicle = await client.get("/v1/maintenance", params={"vehicle_id": first["id"]}, headers=manager_headers)
    assert len(by_vehicle.json()) == 2
    reactive = await client.get("/v1/maintenance", params={"type": "Reactive"}, headers=manager_headers)
    assert len(reactive.json()) == 1
    done = await client.get("/v1/maintenance", params={"status": "Completed"}, headers=manager_headers)
    assert [m["id"] for m in done.json()] == [log["id"]]

    summary = (await client.get("/v1/maintenance/summary", headers=manager_headers)).json()
    assert [row["vehicle_id"] for row in summary] == [second["id"], first["id"]]
    first_row = summary[1]
    assert first_row["total_cost"] == 150
    assert first_row["total_logs"] == 2
    assert first_row["completed_logs"] == 1
    assert first_row["in_progress_logs"] == 1
    assert first_row["last_service"] is not None
    assert summary[0]["last_service"] is None


@pytest.mark.asyncio
async def test_fuel_expense_has_no_side_effects(client, auth_headers, manager_headers, make_vehicle):
    vehicle = await make_vehicle()

    response = await client.post("/v1/expenses", json={
        "vehicle_id": vehicle["id"],
        "expense_type": "Fuel",
        "liters": 40,
        "cost": 90
    }, headers=auth_headers[UserRole.FINANCE])
    assert response.status_code == 201
    expense = response.json()
    assert expense["liters"] == 40
    assert expense["maintenance_id"] is None
    assert expense["vehicle"]["id"] == vehicle["id"]
    assert (await _vehicle(client, manager_headers, vehicle["id"]))["status"] == "Available"


@pytest.mark.asyncio
async def test_standalone_maintenance_expense_sends_vehicle_to_shop(client, manager_headers, make_vehicle):
    vehicle = await make_vehicle()

    response = await client.post("/v1/expenses", json={
        "vehicle_id": vehicle["id"],
        "expense_type": "Maintenance",
        "liters": 12,
        "cost": 400
    }, headers=manager_headers)
    assert response.status_code == 201
    assert response.json()["liters"] == 0
    assert (await _vehicle(client, manager_headers, vehicle["id"]))["status"] == "InShop"
    assert (await client.get("/v1/maintenance", headers=manager_headers)).json() == []


@pytest.mark.asyncio
async def test_maintenance_expense_on_trip_rejected(
    client, manager_headers, make_vehicle, make_driver, dispatch_trip
):
    vehicle = await make_vehicle()
    driver = await make_driver()
    await dispatch_trip(vehicle["id"], driver["id"])

    response = await client.post("/v1/expenses", json={
        "vehicle_id": vehicle["id"],
        "expense_type": "Maintenance",
        "cost": 400
    }, headers=manager_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot log maintenance for a vehicle currently on a trip"


@pytest.mark.asyncio
async def test_expense_for_unknown_vehicle(client, manager_headers):
    response = await client.post("/v1/expenses", json={
        "vehicle_id": 404,
        "expense_type": "Fuel",
        "liters": 1,
        "cost": 2
    }, headers=manager_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Vehicle not found"


@pytest.mark.asyncio
async def test_expense_listing_filters_and_totals(client, manager_headers, make_vehicle):
    first = await make_vehicle()
    second = await make_vehicle()
    for vehicle_id, kind, liters, cost in (
        (first["id"], "Fuel", 30, 60),
        (first["id"], "Fuel", 20, 40),
        (second["id"], "Fuel", 10, 25),
    ):
        await client.post("/v1/expenses", json={
            "vehicle_id": vehicle_id, "expense_type": kind, "liters": liters, "cost": cost
        }, headers=manager_headers)
    await _open_log(client, manager_headers, first["id"], cost=500)

    only_first = await client.get("/v1/expenses", params={"vehicle_id": first["id"]}, headers=manager_headers)
    assert len(only_first.json()) == 3
    fuel = await client.get("/v1/expenses", params={"type": "Fuel"}, headers=manager_headers)
    assert len(fuel.json()) == 3

    totals = (await client.get("/v1/expenses/by-vehicle", headers=manager_headers)).json()
    assert [row["vehicle_id"] for row in totals] == [first["id"], second["id"]]
    assert totals[0] == {
        "vehicle_id": first["id"],
        "vehicle_name": first["name"],
        "license_plate": first["license_plate"],
        "total_fuel_cost": 100,
        "total_maintenance_cost": 500,
        "total_cost": 600,
        "total_liters": 50,
        "count": 3,
    }
