"""
Vehicle Service (Domain Logic).

Registration, edits and removal of fleet vehicles.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.core.exceptions import ConflictError, ValidationError
from fleetflow.app.db.session import unit_of_work
from fleetflow.app.domain.fleet.rules import get_or_404
from fleetflow.app.models.enums import VehicleStatus
from fleetflow.app.models.expense import Expense
from fleetflow.app.models.maintenance import MaintenanceLog
from fleetflow.app.models.trip import Trip
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.schemas.vehicle import VehicleCreate, VehicleUpdate
from fleetflow.app.services.audit import log_event, AuditAction

logger = logging.getLogger(__name__)


class VehicleService:

    @staticmethod
    async def list_vehicles(db: AsyncSession, status: Optional[VehicleStatus] = None) -> List[Vehicle]:
        """List vehicles, newest first, optionally filtered by status."""
        query = select(Vehicle).order_by(Vehicle.created_at.desc(), Vehicle.id.desc())
        if status is not None:
            query = query.where(Vehicle.status == status)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get(db: AsyncSession, vehicle_id: int) -> Vehicle:
        return await get_or_404(db, Vehicle, vehicle_id, "Vehicle")

    @staticmethod
    async def register(db: AsyncSession, data: VehicleCreate, actor: Dict[str, Any]) -> Vehicle:
        """
        Register a new vehicle.

        Raises:
            ValidationError: license plate already registered
        """
        await _ensure_plate_free(db, data.license_plate)

        async with unit_of_work(db):
            vehicle = Vehicle(**data.model_dump())
            db.add(vehicle)
            await db.flush()

            await log_event(
                db=db,
                action=AuditAction.VEHICLE_CREATED,
                actor=actor,
                entity_type="vehicle",
                entity_id=vehicle.id,
                metadata={"license_plate": vehicle.license_plate, "status": vehicle.status.value}
            )

        logger.info("Vehicle %s registered (plate=%s)", vehicle.id, vehicle.license_plate)
        return vehicle

    @staticmethod
    async def update(db: AsyncSession, vehicle_id: int, data: VehicleUpdate, actor: Dict[str, Any]) -> Vehicle:
        """
        Merge the provided fields into the vehicle.

        A plate change is re-checked for uniqueness against every other
        vehicle. A status given here is applied directly, without the
        trip/maintenance lifecycle guards.
        """
        vehicle = await VehicleService.get(db, vehicle_id)

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)

        new_plate = update_data.get("license_plate")
        if new_plate and new_plate != vehicle.license_plate:
            await _ensure_plate_free(db, new_plate, exclude_id=vehicle.id)

        async with unit_of_work(db):
            for field, value in update_data.items():
                setattr(vehicle, field, value)

            await log_event(
                db=db,
                action=AuditAction.VEHICLE_UPDATED,
                actor=actor,
                entity_type="vehicle",
                entity_id=vehicle.id,
                metadata={"updated_fields": sorted(update_data.keys())}
            )

        logger.info("Vehicle %s updated: %s", vehicle.id, sorted(update_data.keys()))
        return vehicle

    @staticmethod
    async def delete(db: AsyncSession, vehicle_id: int, actor: Dict[str, Any]) -> None:
        """
        Remove a vehicle that nothing references.

        Raises:
            ResourceNotFoundError: unknown vehicle
            ConflictError: trips, expenses or maintenance logs still reference it
        """
        vehicle = await VehicleService.get(db, vehicle_id)

        references = {
            "trips": await _count(db, Trip.id, Trip.vehicle_id == vehicle_id),
            "expenses": await _count(db, Expense.id, Expense.vehicle_id == vehicle_id),
            "maintenance_logs": await _count(db, MaintenanceLog.id, MaintenanceLog.vehicle_id == vehicle_id),
        }
        if any(references.values()):
            raise ConflictError(
                "Vehicle has trip, expense or maintenance history; set its status to Retired instead",
                details=references
            )

        async with unit_of_work(db):
            await db.delete(vehicle)
            await log_event(
                db=db,
                action=AuditAction.VEHICLE_DELETED,
                actor=actor,
                entity_type="vehicle",
                entity_id=vehicle_id,
                metadata={"license_plate": vehicle.license_plate}
            )

        logger.info("Vehicle %s deleted", vehicle_id)


async def _ensure_plate_free(db: AsyncSession, plate: str, exclude_id: Optional[int] = None) -> None:
    query = select(Vehicle.id).where(Vehicle.license_plate == plate)
    if exclude_id is not None:
        query = query.where(Vehicle.id != exclude_id)
    existing = (await db.execute(query)).first()
    if existing:
        if exclude_id is None:
            raise ValidationError("Vehicle with this license plate already exists", details={"license_plate": plate})
        raise ValidationError("License plate already in use", details={"license_plate": plate})


async def _count(db: AsyncSession, column, condition) -> int:
    return (await db.execute(select(func.count(column)).where(condition))).scalar() or 0
