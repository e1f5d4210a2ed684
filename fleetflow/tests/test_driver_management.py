"""
Driver roster tests: registration, uniqueness and the duty toggle.
"""

import pytest

from fleetflow.app.core.exceptions import ConflictError
from fleetflow.app.domain.fleet.driver_service import next_duty_status
from fleetflow.app.models.enums import DriverStatus, UserRole


@pytest.mark.parametrize("current,expected", [
    (DriverStatus.ON_DUTY, DriverStatus.OFF_DUTY),
    (DriverStatus.OFF_DUTY, DriverStatus.ON_DUTY),
    (DriverStatus.SUSPENDED, DriverStatus.ON_DUTY),
])
def test_toggle_transitions(current, expected):
    assert next_duty_status(current) == expected


def test_toggle_rejected_on_trip():
    with pytest.raises(ConflictError):
        next_duty_status(DriverStatus.ON_TRIP)


@pytest.mark.asyncio
async def test_register_driver_defaults(make_driver):
    driver = await make_driver()
    assert driver["status"] == "OnDuty"
    assert driver["safety_score"] == 100


@pytest.mark.asyncio
async def test_duplicate_license_rejected(client, manager_headers, make_driver):
    existing = await make_driver(license_number="LIC-1")

    response = await client.post("/v1/drivers", json={
        "name": "Other",
        "license_number": "LIC-1",
        "license_expiry": existing["license_expiry"],
        "category": "Van"
    }, headers=manager_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Driver with this license number already exists"


@pytest.mark.asyncio
async def test_update_license_to_taken_number_rejected(client, manager_headers, make_driver):
    first = await make_driver(license_number="LIC-A")
    await make_driver(license_number="LIC-B")

    response = await client.put(
        f"/v1/drivers/{first['id']}", json={"license_number": "LIC-B"}, headers=manager_headers
    )
    assert response.status_code == 400
    assert response.json()["message"] == "License number already in use"


@pytest.mark.asyncio
async def test_safety_officer_updates_score(client, auth_headers, make_driver):
    driver = await make_driver()

    response = await client.put(
        f"/v1/drivers/{driver['id']}",
        json={"safety_score": 72},
        headers=auth_headers[UserRole.SAFETY]
    )
    assert response.status_code == 200
    assert response.json()["safety_score"] == 72


@pytest.mark.asyncio
async def test_safety_score_out_of_range(client, manager_headers, make_driver):
    driver = await make_driver()
    response = await client.put(
        f"/v1/drivers/{driver['id']}", json={"safety_score": 101}, headers=manager_headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_toggle_cycle(client, manager_headers, make_driver):
    driver = await make_driver()
    path = f"/v1/drivers/{driver['id']}/toggle-status"

    response = await client.put(path, headers=manager_headers)
    assert response.json()["status"] == "OffDuty"

    response = await client.put(path, headers=manager_headers)
    assert response.json()["status"] == "OnDuty"


@pytest.mark.asyncio
async def test_toggle_clears_suspension(client, manager_headers, make_driver):
    driver = await make_driver(status="Suspended")

    response = await client.put(f"/v1/drivers/{driver['id']}/toggle-status", headers=manager_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "OnDuty"


@pytest.mark.asyncio
async def test_toggle_while_on_trip_rejected(
    client, manager_headers, make_vehicle, make_driver, dispatch_trip
):
    vehicle = await make_vehicle()
    driver = await make_driver()
    assert (await dispatch_trip(vehicle["id"], driver["id"])).status_code == 201

    response = await client.put(f"/v1/drivers/{driver['id']}/toggle-status", headers=manager_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot change status while driver is on a trip"

    current = await client.get(f"/v1/drivers/{driver['id']}", headers=manager_headers)
    assert current.json()["status"] == "OnTrip"


@pytest.mark.asyncio
async def test_toggle_unknown_driver_is_404(client, manager_headers):
    response = await client.put("/v1/drivers/999/toggle-status", headers=manager_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_driver(client, manager_headers, make_driver):
    driver = await make_driver()

    response = await client.delete(f"/v1/drivers/{driver['id']}", headers=manager_headers)
    assert response.status_code == 200

    listing = await client.get("/v1/drivers", headers=manager_headers)
    assert listing.json() == []
