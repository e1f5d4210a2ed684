"""
Expense Service (Domain Logic).

Fuel and maintenance expense logging and per-vehicle expense totals.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from fleetflow.app.core.exceptions import ConflictError, ResourceNotFoundError, ValidationError
from fleetflow.app.db.session import unit_of_work
from fleetflow.app.domain.fleet.rules import load_for_update
from fleetflow.app.models.base import utcnow
from fleetflow.app.models.enums import ExpenseType, VehicleStatus
from fleetflow.app.models.expense import Expense
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.schemas.expense import ExpenseCreate
from fleetflow.app.services.audit import log_event, AuditAction

logger = logging.getLogger(__name__)


class ExpenseService:

    @staticmethod
    async def list_expenses(
        db: AsyncSession,
        vehicle_id: Optional[int] = None,
        expense_type: Optional[ExpenseType] = None
    ) -> List[Expense]:
        """List expenses, most recent date first."""
        query = (
            select(Expense)
            .options(joinedload(Expense.vehicle))
            .order_by(Expense.date.desc(), Expense.id.desc())
        )
        if vehicle_id is not None:
            query = query.where(Expense.vehicle_id == vehicle_id)
        if expense_type is not None:
            query = query.where(Expense.expense_type == expense_type)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get(db: AsyncSession, expense_id: int) -> Expense:
        expense = await _load_expense(db, expense_id)
        if expense is None:
            raise ResourceNotFoundError("Expense", expense_id)
        return expense

    @staticmethod
    async def log_expense(db: AsyncSession, data: ExpenseCreate, actor: Dict[str, Any]) -> Expense:
        """
        Record an expense against a vehicle.

        A Maintenance expense logged here also sends the vehicle to the shop,
        without opening a maintenance service log. Fuel expenses leave the
        vehicle untouched.

        Raises:
            ValidationError: vehicle does not exist
            ConflictError: maintenance logged for a vehicle on a trip
        """
        async with unit_of_work(db):
            vehicle = await load_for_update(db, Vehicle, data.vehicle_id)
            if vehicle is None:
                raise ValidationError("Vehicle not found", details={"vehicle_id": data.vehicle_id})

            is_maintenance = data.expense_type == ExpenseType.MAINTENANCE
            if is_maintenance and vehicle.status == VehicleStatus.ON_TRIP:
                raise ConflictError(
                    "Cannot log maintenance for a vehicle currently on a trip",
                    details={"vehicle_id": vehicle.id}
                )

            expense = Expense(
                vehicle_id=vehicle.id,
                expense_type=data.expense_type,
                liters=data.liters if data.expense_type == ExpenseType.FUEL else 0,
                cost=data.cost,
                date=data.date or utcnow(),
            )
            db.add(expense)

            if is_maintenance:
                vehicle.status = VehicleStatus.IN_SHOP
            await db.flush()

            await log_event(
                db=db,
                action=AuditAction.EXPENSE_LOGGED,
                actor=actor,
                entity_type="expense",
                entity_id=expense.id,
                metadata={
                    "vehicle_id": vehicle.id,
                    "expense_type": data.expense_type.value,
                    "cost": data.cost,
                }
            )

        logger.info(
            "Expense %s logged (vehicle=%s, type=%s, cost=%s)",
            expense.id, vehicle.id, data.expense_type.value, data.cost
        )
        return await ExpenseService.get(db, expense.id)

    @staticmethod
    async def summary_by_vehicle(db: AsyncSession) -> List[Dict[str, Any]]:
        """Expense totals for every vehicle with at least one expense."""
        fuel_cost = func.sum(case((Expense.expense_type == ExpenseType.FUEL, Expense.cost), else_=0))
        maintenance_cost = func.sum(
            case((Expense.expense_type == ExpenseType.MAINTENANCE, Expense.cost), else_=0)
        )

        query = (
            select(
                Vehicle.id,
                Vehicle.name,
                Vehicle.license_plate,
                fuel_cost.label("total_fuel_cost"),
                maintenance_cost.label("total_maintenance_cost"),
                func.sum(Expense.cost).label("total_cost"),
                func.sum(Expense.liters).label("total_liters"),
                func.count(Expense.id).label("expense_count"),
            )
            .select_from(Expense)
            .join(Vehicle, Vehicle.id == Expense.vehicle_id)
            .group_by(Vehicle.id, Vehicle.name, Vehicle.license_plate)
            .order_by(func.sum(Expense.cost).desc())
        )
        result = await db.execute(query)

        return [
            {
                "vehicle_id": row.id,
                "vehicle_name": row.name,
                "license_plate": row.license_plate,
                "total_fuel_cost": float(row.total_fuel_cost or 0),
                "total_maintenance_cost": float(row.total_maintenance_cost or 0),
                "total_cost": float(row.total_cost or 0),
                "total_liters": float(row.total_liters or 0),
                "count": row.expense_count,
            }
            for row in result.all()
        ]


async def _load_expense(db: AsyncSession, expense_id: int) -> Optional[Expense]:
    result = await db.execute(
        select(Expense)
        .options(joinedload(Expense.vehicle))
        .where(Expense.id == expense_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()
