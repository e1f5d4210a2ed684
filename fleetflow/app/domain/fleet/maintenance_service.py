"""
Maintenance Service (Domain Logic).

Service logs and their coupling to vehicle status and expenses:
opening a log sends the vehicle to the shop and books a Maintenance
expense; completing or deleting an open log releases the vehicle.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, func, case, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from fleetflow.app.core.config import settings
from fleetflow.app.core.exceptions import ConflictError, ResourceNotFoundError, ValidationError
from fleetflow.app.db.session import unit_of_work
from fleetflow.app.domain.fleet.rules import load_for_update
from fleetflow.app.models.base import utcnow
from fleetflow.app.models.enums import (
    ExpenseType,
    MaintenanceStatus,
    MaintenanceType,
    VehicleStatus,
)
from fleetflow.app.models.expense import Expense
from fleetflow.app.models.maintenance import MaintenanceLog
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.schemas.maintenance import MaintenanceCreate, MaintenanceComplete
from fleetflow.app.services.audit import log_event, AuditAction

logger = logging.getLogger(__name__)


class MaintenanceService:

    @staticmethod
    async def list_logs(
        db: AsyncSession,
        vehicle_id: Optional[int] = None,
        status: Optional[MaintenanceStatus] = None,
        maintenance_type: Optional[MaintenanceType] = None
    ) -> List[MaintenanceLog]:
        query = (
            select(MaintenanceLog)
            .options(joinedload(MaintenanceLog.vehicle))
            .order_by(MaintenanceLog.created_at.desc(), MaintenanceLog.id.desc())
        )
        if vehicle_id is not None:
            query = query.where(MaintenanceLog.vehicle_id == vehicle_id)
        if status is not None:
            query = query.where(MaintenanceLog.status == status)
        if maintenance_type is not None:
            query = query.where(MaintenanceLog.maintenance_type == maintenance_type)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get(db: AsyncSession, log_id: int) -> MaintenanceLog:
        log = await _load_log(db, log_id)
        if log is None:
            raise ResourceNotFoundError("Maintenance log", log_id)
        return log

    @staticmethod
    async def create(db: AsyncSession, data: MaintenanceCreate, actor: Dict[str, Any]) -> MaintenanceLog:
        """
        Open a service log for a vehicle.

        Flow:
        1. Lock the vehicle and reject it if it is on a trip
        2. Create the InProgress log
        3. Book the linked Maintenance expense
        4. Move the vehicle to InShop

        Raises:
            ValidationError: vehicle does not exist
            ConflictError: vehicle is on a trip
        """
        async with unit_of_work(db):
            vehicle = await load_for_update(db, Vehicle, data.vehicle_id)
            if vehicle is None:
                raise ValidationError("Vehicle not found", details={"vehicle_id": data.vehicle_id})
            if vehicle.status == VehicleStatus.ON_TRIP:
                raise ConflictError(
                    "Cannot schedule maintenance for a vehicle currently on a trip",
                    details={"vehicle_id": vehicle.id}
                )

            service_date = data.scheduled_date or utcnow()
            log = MaintenanceLog(
                vehicle_id=vehicle.id,
                maintenance_type=data.maintenance_type,
                description=data.description,
                cost=data.cost,
                status=MaintenanceStatus.IN_PROGRESS,
                scheduled_date=service_date,
                # A zero or missing reading falls back to the vehicle odometer
                odometer_at_service=data.odometer_at_service or vehicle.odometer,
                notes=data.notes or "",
            )
            db.add(log)
            await db.flush()

            db.add(Expense(
                vehicle_id=vehicle.id,
                expense_type=ExpenseType.MAINTENANCE,
                liters=0,
                cost=data.cost,
                date=service_date,
                maintenance_id=log.id,
            ))

            vehicle.status = VehicleStatus.IN_SHOP
            await db.flush()

            await log_event(
                db=db,
                action=AuditAction.MAINTENANCE_CREATED,
                actor=actor,
                entity_type="maintenance",
                entity_id=log.id,
                metadata={
                    "vehicle_id": vehicle.id,
                    "maintenance_type": data.maintenance_type.value,
                    "cost": data.cost,
                }
            )

        logger.info("Maintenance log %s opened, vehicle %s in shop", log.id, vehicle.id)
        return await MaintenanceService.get(db, log.id)

    @staticmethod
    async def complete(
        db: AsyncSession,
        log_id: int,
        data: MaintenanceComplete,
        actor: Dict[str, Any]
    ) -> MaintenanceLog:
        """
        Close a service log.

        The vehicle is released only if it is still InShop. A non-zero cost
        override is copied to the linked expense only when
        settings.sync_maintenance_expense_cost is enabled.

        Raises:
            ResourceNotFoundError: unknown log
            ConflictError: log already completed
        """
        async with unit_of_work(db):
            log = await load_for_update(db, MaintenanceLog, log_id)
            if log is None:
                raise ResourceNotFoundError("Maintenance log", log_id)
            if log.status == MaintenanceStatus.COMPLETED:
                raise ConflictError("Maintenance already completed")

            log.status = MaintenanceStatus.COMPLETED
            log.completed_date = utcnow()
            if data.notes:
                log.notes = data.notes
            # Zero or missing cost keeps the booked cost
            if data.cost:
                log.cost = data.cost
                if settings.sync_maintenance_expense_cost:
                    await db.execute(
                        update(Expense)
                        .where(Expense.maintenance_id == log.id)
                        .values(cost=data.cost, updated_at=utcnow())
                        .execution_options(synchronize_session="fetch")
                    )

            vehicle = await load_for_update(db, Vehicle, log.vehicle_id)
            released = vehicle is not None and vehicle.status == VehicleStatus.IN_SHOP
            if released:
                vehicle.status = VehicleStatus.AVAILABLE

            await log_event(
                db=db,
                action=AuditAction.MAINTENANCE_COMPLETED,
                actor=actor,
                entity_type="maintenance",
                entity_id=log.id,
                metadata={"vehicle_id": log.vehicle_id, "cost": log.cost, "vehicle_released": released}
            )

        logger.info("Maintenance log %s completed (vehicle released=%s)", log.id, released)
        return await MaintenanceService.get(db, log.id)

    @staticmethod
    async def delete(db: AsyncSession, log_id: int, actor: Dict[str, Any]) -> None:
        """
        Delete a service log, releasing the vehicle if the log was still open.

        The linked expense is kept and loses its maintenance_id.
        """
        async with unit_of_work(db):
            log = await load_for_update(db, MaintenanceLog, log_id)
            if log is None:
                raise ResourceNotFoundError("Maintenance log", log_id)

            released = False
            if log.status == MaintenanceStatus.IN_PROGRESS:
                vehicle = await load_for_update(db, Vehicle, log.vehicle_id)
                if vehicle is not None and vehicle.status == VehicleStatus.IN_SHOP:
                    vehicle.status = VehicleStatus.AVAILABLE
                    released = True

            await db.execute(
                update(Expense)
                .where(Expense.maintenance_id == log.id)
                .values(maintenance_id=None)
                .execution_options(synchronize_session="fetch")
            )
            await db.delete(log)

            await log_event(
                db=db,
                action=AuditAction.MAINTENANCE_DELETED,
                actor=actor,
                entity_type="maintenance",
                entity_id=log_id,
                metadata={"vehicle_id": log.vehicle_id, "vehicle_released": released}
            )

        logger.info("Maintenance log %s deleted (vehicle released=%s)", log_id, released)

    @staticmethod
    async def summary_by_vehicle(db: AsyncSession) -> List[Dict[str, Any]]:
        """Service history totals for every vehicle with at least one log."""
        completed = func.sum(case((MaintenanceLog.status == MaintenanceStatus.COMPLETED, 1), else_=0))
        in_progress = func.sum(case((MaintenanceLog.status == MaintenanceStatus.IN_PROGRESS, 1), else_=0))

        query = (
            select(
                Vehicle.id,
                Vehicle.name,
                Vehicle.license_plate,
                Vehicle.vehicle_type,
                Vehicle.status,
                func.sum(MaintenanceLog.cost).label("total_cost"),
                func.count(MaintenanceLog.id).label("total_logs"),
                completed.label("completed_logs"),
                in_progress.label("in_progress_logs"),
                func.max(MaintenanceLog.completed_date).label("last_service"),
            )
            .select_from(MaintenanceLog)
            .join(Vehicle, Vehicle.id == MaintenanceLog.vehicle_id)
            .group_by(Vehicle.id, Vehicle.name, Vehicle.license_plate, Vehicle.vehicle_type, Vehicle.status)
            .order_by(func.sum(MaintenanceLog.cost).desc())
        )
        result = await db.execute(query)

        return [
            {
                "vehicle_id": row.id,
                "vehicle_name": row.name,
                "license_plate": row.license_plate,
                "vehicle_type": row.vehicle_type,
                "vehicle_status": row.status,
                "total_cost": float(row.total_cost or 0),
                "total_logs": row.total_logs,
                "completed_logs": int(row.completed_logs or 0),
                "in_progress_logs": int(row.in_progress_logs or 0),
                "last_service": row.last_service,
            }
            for row in result.all()
        ]


async def _load_log(db: AsyncSession, log_id: int) -> Optional[MaintenanceLog]:
    result = await db.execute(
        select(MaintenanceLog)
        .options(joinedload(MaintenanceLog.vehicle))
        .where(MaintenanceLog.id == log_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()
