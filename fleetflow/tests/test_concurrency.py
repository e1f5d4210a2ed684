"""
Concurrency and atomicity tests.

Validates that stale writes are rejected and that a failing unit of work
leaves no partial state behind.
"""

import pytest
from sqlalchemy.exc import OperationalError

from fleetflow.app.core.exceptions import ConflictError
from fleetflow.app.db.session import unit_of_work
from fleetflow.app.models.enums import VehicleStatus
from fleetflow.app.models.vehicle import Vehicle
import fleetflow.app.domain.fleet.trip_service as trip_service_module


@pytest.mark.asyncio
async def test_stale_vehicle_write_is_a_conflict(make_vehicle, session_factory):
    vehicle = await make_vehicle()

    async with session_factory() as first, session_factory() as second:
        stale = await first.get(Vehicle, vehicle["id"])
        fresh = await second.get(Vehicle, vehicle["id"])

        # Second operation wins the race
        async with unit_of_work(second):
            fresh.status = VehicleStatus.ON_TRIP
        assert fresh.version == 2

        stale.status = VehicleStatus.IN_SHOP
        with pytest.raises(ConflictError):
            async with unit_of_work(first):
                pass

    async with session_factory() as check:
        current = await check.get(Vehicle, vehicle["id"])
        assert current.status == VehicleStatus.ON_TRIP


@pytest.mark.asyncio
async def test_second_dispatch_of_same_vehicle_fails(make_vehicle, make_driver, dispatch_trip):
    vehicle = await make_vehicle()
    first_driver = await make_driver()
    second_driver = await make_driver()

    first = await dispatch_trip(vehicle["id"], first_driver["id"])
    second = await dispatch_trip(vehicle["id"], second_driver["id"])

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json()["error_code"] == "ERR_CONFLICT_001"


@pytest.mark.asyncio
async def test_failed_dispatch_leaves_no_partial_state(
    client, manager_headers, make_vehicle, make_driver, dispatch_trip, monkeypatch
):
    vehicle = await make_vehicle()
    driver = await make_driver()

    async def broken_audit(*args, **kwargs):
        raise OperationalError("INSERT INTO audit_logs", {}, Exception("disk I/O error"))

    monkeypatch.setattr(trip_service_module, "log_event", broken_audit)

    response = await dispatch_trip(vehicle["id"], driver["id"])
    assert response.status_code == 500
    assert response.json()["error_code"] == "ERR_STORE_001"

    assert (await client.get("/v1/trips", headers=manager_headers)).json() == []
    vehicle_after = (await client.get(f"/v1/vehicles/{vehicle['id']}", headers=manager_headers)).json()
    driver_after = (await client.get(f"/v1/drivers/{driver['id']}", headers=manager_headers)).json()
    assert vehicle_after["status"] == "Available"
    assert driver_after["status"] == "OnDuty"
