"""
Trip Service (Domain Logic).

Dispatch, completion and cancellation of trips, together with the vehicle
and driver status changes each one implies.

Every operation validates first and then applies the trip, vehicle and
driver mutations as a single unit of work.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from fleetflow.app.core.exceptions import ConflictError, ResourceNotFoundError, ValidationError
from fleetflow.app.db.session import unit_of_work
from fleetflow.app.domain.fleet.rules import load_for_update, plain_number
from fleetflow.app.models.base import as_utc, utcnow
from fleetflow.app.models.driver import Driver
from fleetflow.app.models.enums import DriverStatus, TripStatus, VehicleStatus
from fleetflow.app.models.trip import Trip
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.schemas.trip import TripDispatch, TripComplete
from fleetflow.app.services.audit import log_event, AuditAction

logger = logging.getLogger(__name__)


def check_dispatchable(vehicle: Optional[Vehicle], driver: Optional[Driver], cargo_weight: float) -> None:
    """
    Validate a vehicle/driver pairing for dispatch.

    Checks run in a fixed order and the first failure wins:
    vehicle exists, vehicle available, driver exists, driver on duty,
    license valid, cargo within capacity.

    Raises:
        ValidationError: vehicle or driver does not exist
        ConflictError: any state rule fails
    """
    if vehicle is None:
        raise ValidationError("Vehicle not found")
    if vehicle.status != VehicleStatus.AVAILABLE:
        raise ConflictError(
            f"Vehicle is not available (current status: {vehicle.status.value})",
            details={"vehicle_id": vehicle.id, "current_status": vehicle.status.value}
        )

    if driver is None:
        raise ValidationError("Driver not found")
    if driver.status != DriverStatus.ON_DUTY:
        raise ConflictError(
            f"Driver is not on duty (current status: {driver.status.value})",
            details={"driver_id": driver.id, "current_status": driver.status.value}
        )
    if as_utc(driver.license_expiry) < utcnow():
        raise ConflictError(
            "Driver license has expired",
            details={"driver_id": driver.id, "license_expiry": as_utc(driver.license_expiry).isoformat()}
        )

    if cargo_weight > vehicle.max_capacity:
        raise ConflictError(
            f"Cargo weight ({plain_number(cargo_weight)}kg) exceeds vehicle capacity "
            f"({plain_number(vehicle.max_capacity)}kg)",
            details={"cargo_weight": cargo_weight, "max_capacity": vehicle.max_capacity}
        )


class TripService:

    @staticmethod
    async def list_trips(db: AsyncSession, status: Optional[TripStatus] = None) -> List[Trip]:
        """List trips newest first, with vehicle and driver loaded."""
        query = (
            select(Trip)
            .options(joinedload(Trip.vehicle), joinedload(Trip.driver))
            .order_by(Trip.created_at.desc(), Trip.id.desc())
        )
        if status is not None:
            query = query.where(Trip.status == status)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get(db: AsyncSession, trip_id: int) -> Trip:
        trip = await _load_trip(db, trip_id)
        if trip is None:
            raise ResourceNotFoundError("Trip", trip_id)
        return trip

    @staticmethod
    async def dispatch(db: AsyncSession, data: TripDispatch, actor: Dict[str, Any]) -> Trip:
        """
        Create a trip and put its vehicle and driver on the road.

        The vehicle and driver rows are locked for the duration of the unit so
        two dispatches of the same vehicle cannot both see it Available.
        """
        async with unit_of_work(db):
            vehicle = await load_for_update(db, Vehicle, data.vehicle_id)
            driver = await load_for_update(db, Driver, data.driver_id)
            check_dispatchable(vehicle, driver, data.cargo_weight)

            trip = Trip(
                vehicle_id=vehicle.id,
                driver_id=driver.id,
                cargo_weight=data.cargo_weight,
                origin=data.origin or "",
                destination=data.destination or "",
                start_odometer=vehicle.odometer,
                revenue=data.revenue or 0,
                status=TripStatus.DISPATCHED,
            )
            db.add(trip)

            vehicle.status = VehicleStatus.ON_TRIP
            driver.status = DriverStatus.ON_TRIP
            await db.flush()

            await log_event(
                db=db,
                action=AuditAction.TRIP_DISPATCHED,
                actor=actor,
                entity_type="trip",
                entity_id=trip.id,
                metadata={
                    "vehicle_id": vehicle.id,
                    "driver_id": driver.id,
                    "cargo_weight": data.cargo_weight,
                    "start_odometer": trip.start_odometer,
                }
            )

        logger.info("Trip %s dispatched (vehicle=%s, driver=%s)", trip.id, vehicle.id, driver.id)
        return await TripService.get(db, trip.id)

    @staticmethod
    async def complete(db: AsyncSession, trip_id: int, data: TripComplete, actor: Dict[str, Any]) -> Trip:
        """
        Close a dispatched trip at the given odometer reading.

        The vehicle returns to Available at the new odometer reading and the
        driver returns to OnDuty. A vehicle or driver record that has gone
        missing is skipped rather than failing the completion.

        Raises:
            ResourceNotFoundError: unknown trip
            ConflictError: trip not dispatched, or end odometer not past the start
        """
        async with unit_of_work(db):
            trip = await load_for_update(db, Trip, trip_id)
            if trip is None:
                raise ResourceNotFoundError("Trip", trip_id)

            if trip.status != TripStatus.DISPATCHED:
                raise ConflictError(
                    "Only dispatched trips can be completed",
                    details={"current_status": trip.status.value}
                )
            if data.end_odometer is None or data.end_odometer <= trip.start_odometer:
                raise ConflictError(
                    "End odometer must be greater than start odometer",
                    details={"start_odometer": trip.start_odometer, "end_odometer": data.end_odometer}
                )

            trip.end_odometer = data.end_odometer
            trip.distance = data.end_odometer - trip.start_odometer
            if data.revenue is not None:
                trip.revenue = data.revenue
            trip.status = TripStatus.COMPLETED

            vehicle = await load_for_update(db, Vehicle, trip.vehicle_id)
            if vehicle is not None:
                vehicle.status = VehicleStatus.AVAILABLE
                vehicle.odometer = data.end_odometer
            else:
                logger.warning("Trip %s completed without vehicle %s", trip.id, trip.vehicle_id)

            driver = await load_for_update(db, Driver, trip.driver_id)
            if driver is not None:
                driver.status = DriverStatus.ON_DUTY
            else:
                logger.warning("Trip %s completed without driver %s", trip.id, trip.driver_id)

            await log_event(
                db=db,
                action=AuditAction.TRIP_COMPLETED,
                actor=actor,
                entity_type="trip",
                entity_id=trip.id,
                metadata={"end_odometer": trip.end_odometer, "distance": trip.distance, "revenue": trip.revenue}
            )

        logger.info("Trip %s completed (distance=%s)", trip.id, trip.distance)
        return await TripService.get(db, trip.id)

    @staticmethod
    async def cancel(db: AsyncSession, trip_id: int, actor: Dict[str, Any]) -> Trip:
        """
        Cancel a trip that has not been completed.

        A dispatched trip releases its vehicle to Available and its driver to
        OnDuty; any other non-completed trip is simply marked Cancelled.
        """
        async with unit_of_work(db):
            trip = await load_for_update(db, Trip, trip_id)
            if trip is None:
                raise ResourceNotFoundError("Trip", trip_id)

            if trip.status == TripStatus.COMPLETED:
                raise ConflictError("Cannot cancel a completed trip")

            previous = trip.status
            if previous == TripStatus.DISPATCHED:
                vehicle = await load_for_update(db, Vehicle, trip.vehicle_id)
                if vehicle is not None:
                    vehicle.status = VehicleStatus.AVAILABLE
                driver = await load_for_update(db, Driver, trip.driver_id)
                if driver is not None:
                    driver.status = DriverStatus.ON_DUTY

            trip.status = TripStatus.CANCELLED

            await log_event(
                db=db,
                action=AuditAction.TRIP_CANCELLED,
                actor=actor,
                entity_type="trip",
                entity_id=trip.id,
                metadata={"previous_status": previous.value}
            )

        logger.info("Trip %s cancelled (was %s)", trip.id, previous.value)
        return await TripService.get(db, trip.id)


async def _load_trip(db: AsyncSession, trip_id: int) -> Optional[Trip]:
    result = await db.execute(
        select(Trip)
        .options(joinedload(Trip.vehicle), joinedload(Trip.driver))
        .where(Trip.id == trip_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()
