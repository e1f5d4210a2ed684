"""
Analytics Service.

Handles data aggregation for the dashboard and the financial reports.
Focused on READ-ONLY operations.
"""

import math
from typing import Any, Dict, List

from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.models.driver import Driver
from fleetflow.app.models.enums import DriverStatus, ExpenseType, TripStatus, VehicleStatus
from fleetflow.app.models.expense import Expense
from fleetflow.app.models.trip import Trip
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.schemas.analytics import (
    DashboardStats, FuelEfficiencyRow, VehicleROIRow, DriverPerformanceRow
)


def half_up(value: float) -> int:
    """Round halves towards positive infinity (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def utilization_percent(on_trip: int, active_fleet: int) -> int:
    if active_fleet <= 0:
        return 0
    return half_up(on_trip / active_fleet * 100)


def fuel_efficiency(total_distance: float, total_liters: float) -> float:
    """km per liter to two decimals, 0 when no fuel was logged."""
    if total_liters <= 0:
        return 0
    return half_up(total_distance / total_liters * 100) / 100


def roi_percent(total_revenue: float, total_expenses: float, acquisition_cost: float) -> float:
    """Return on acquisition cost as a percentage to two decimals."""
    if acquisition_cost <= 0:
        return 0
    return half_up((total_revenue - total_expenses) / acquisition_cost * 10000) / 100


def completion_rate(completed: int, total: int) -> int:
    if total <= 0:
        return 0
    return half_up(completed / total * 100)


async def _count_by_status(db: AsyncSession, model) -> Dict[Any, int]:
    result = await db.execute(
        select(model.status, func.count(model.id)).group_by(model.status)
    )
    return {status: count for status, count in result.all()}


class AnalyticsService:

    @staticmethod
    async def get_dashboard_stats(db: AsyncSession) -> DashboardStats:
        """Get fleet-wide status counts and utilization."""
        vehicles = await _count_by_status(db, Vehicle)
        drivers = await _count_by_status(db, Driver)
        trips = await _count_by_status(db, Trip)

        total_vehicles = sum(vehicles.values())
        retired = vehicles.get(VehicleStatus.RETIRED, 0)
        on_trip = vehicles.get(VehicleStatus.ON_TRIP, 0)
        active_fleet = total_vehicles - retired

        return DashboardStats(
            total_vehicles=total_vehicles,
            available_vehicles=vehicles.get(VehicleStatus.AVAILABLE, 0),
            on_trip_vehicles=on_trip,
            in_shop_vehicles=vehicles.get(VehicleStatus.IN_SHOP, 0),
            retired_vehicles=retired,
            active_fleet=active_fleet,
            utilization=utilization_percent(on_trip, active_fleet),
            total_drivers=sum(drivers.values()),
            on_duty_drivers=drivers.get(DriverStatus.ON_DUTY, 0),
            off_duty_drivers=drivers.get(DriverStatus.OFF_DUTY, 0),
            suspended_drivers=drivers.get(DriverStatus.SUSPENDED, 0),
            on_trip_drivers=drivers.get(DriverStatus.ON_TRIP, 0),
            total_trips=sum(trips.values()),
            pending_trips=trips.get(TripStatus.DISPATCHED, 0),
            completed_trips=trips.get(TripStatus.COMPLETED, 0),
            cancelled_trips=trips.get(TripStatus.CANCELLED, 0),
        )

    @staticmethod
    async def get_fuel_efficiency(db: AsyncSession) -> List[FuelEfficiencyRow]:
        """
        Distance per liter for each vehicle with at least one completed trip.

        Vehicles with fuel expenses but no completed trips are not listed.
        """
        trip_stats = (
            select(
                Trip.vehicle_id.label("vehicle_id"),
                func.sum(Trip.distance).label("total_distance"),
                func.sum(Trip.revenue).label("total_revenue"),
                func.count(Trip.id).label("trip_count"),
            )
            .where(Trip.status == TripStatus.COMPLETED)
            .group_by(Trip.vehicle_id)
            .subquery()
        )
        fuel_stats = (
            select(
                Expense.vehicle_id.label("vehicle_id"),
                func.sum(Expense.liters).label("total_liters"),
                func.sum(Expense.cost).label("total_fuel_cost"),
            )
            .where(Expense.expense_type == ExpenseType.FUEL)
            .group_by(Expense.vehicle_id)
            .subquery()
        )

        query = (
            select(
                Vehicle,
                trip_stats.c.total_distance,
                trip_stats.c.total_revenue,
                trip_stats.c.trip_count,
                fuel_stats.c.total_liters,
                fuel_stats.c.total_fuel_cost,
            )
            .join(trip_stats, trip_stats.c.vehicle_id == Vehicle.id)
            .outerjoin(fuel_stats, fuel_stats.c.vehicle_id == Vehicle.id)
            .order_by(Vehicle.id)
        )
        result = await db.execute(query)

        rows = []
        for vehicle, distance, revenue, trip_count, liters, fuel_cost in result.all():
            distance = float(distance or 0)
            liters = float(liters or 0)
            rows.append(FuelEfficiencyRow(
                vehicle_id=vehicle.id,
                vehicle_name=vehicle.name,
                license_plate=vehicle.license_plate,
                vehicle_type=vehicle.vehicle_type.value,
                total_distance=distance,
                total_liters=liters,
                total_fuel_cost=float(fuel_cost or 0),
                efficiency=fuel_efficiency(distance, liters),
                trip_count=trip_count,
                total_revenue=float(revenue or 0),
            ))
        return rows

    @staticmethod
    async def get_vehicle_roi(db: AsyncSession) -> List[VehicleROIRow]:
        """Return on acquisition cost for every vehicle in the fleet."""
        trip_stats = (
            select(
                Trip.vehicle_id.label("vehicle_id"),
                func.sum(Trip.revenue).label("total_revenue"),
                func.sum(Trip.distance).label("total_distance"),
            )
            .where(Trip.status == TripStatus.COMPLETED)
            .group_by(Trip.vehicle_id)
            .subquery()
        )
        expense_stats = (
            select(
                Expense.vehicle_id.label("vehicle_id"),
                func.sum(
                    case((Expense.expense_type == ExpenseType.FUEL, Expense.cost), else_=0)
                ).label("total_fuel_cost"),
                func.sum(
                    case((Expense.expense_type == ExpenseType.MAINTENANCE, Expense.cost), else_=0)
                ).label("total_maintenance_cost"),
            )
            .group_by(Expense.vehicle_id)
            .subquery()
        )

        query = (
            select(
                Vehicle,
                trip_stats.c.total_revenue,
                trip_stats.c.total_distance,
                expense_stats.c.total_fuel_cost,
                expense_stats.c.total_maintenance_cost,
            )
            .outerjoin(trip_stats, trip_stats.c.vehicle_id == Vehicle.id)
            .outerjoin(expense_stats, expense_stats.c.vehicle_id == Vehicle.id)
            .order_by(Vehicle.id)
        )
        result = await db.execute(query)

        rows = []
        for vehicle, revenue, distance, fuel_cost, maintenance_cost in result.all():
            revenue = float(revenue or 0)
            fuel_cost = float(fuel_cost or 0)
            maintenance_cost = float(maintenance_cost or 0)
            total_expenses = fuel_cost + maintenance_cost
            rows.append(VehicleROIRow(
                vehicle_id=vehicle.id,
                vehicle_name=vehicle.name,
                license_plate=vehicle.license_plate,
                vehicle_type=vehicle.vehicle_type.value,
                acquisition_cost=vehicle.acquisition_cost,
                total_revenue=revenue,
                total_fuel_cost=fuel_cost,
                total_maintenance_cost=maintenance_cost,
                total_expenses=total_expenses,
                total_distance=float(distance or 0),
                roi=roi_percent(revenue, total_expenses, vehicle.acquisition_cost),
            ))
        return rows

    @staticmethod
    async def get_driver_performance(db: AsyncSession) -> List[DriverPerformanceRow]:
        """Trip counts and completed-trip totals for every driver."""
        completed = Trip.status == TripStatus.COMPLETED
        trip_stats = (
            select(
                Trip.driver_id.label("driver_id"),
                func.count(Trip.id).label("total_trips"),
                func.sum(case((completed, 1), else_=0)).label("completed_trips"),
                func.sum(case((Trip.status == TripStatus.CANCELLED, 1), else_=0)).label("cancelled_trips"),
                func.sum(case((Trip.status == TripStatus.DISPATCHED, 1), else_=0)).label("active_trips"),
                func.sum(case((completed, Trip.distance), else_=0)).label("total_distance"),
                func.sum(case((completed, Trip.revenue), else_=0)).label("total_revenue"),
                func.sum(case((completed, Trip.cargo_weight), else_=0)).label("total_cargo"),
            )
            .group_by(Trip.driver_id)
            .subquery()
        )

        query = (
            select(
                Driver,
                trip_stats.c.total_trips,
                trip_stats.c.completed_trips,
                trip_stats.c.cancelled_trips,
                trip_stats.c.active_trips,
                trip_stats.c.total_distance,
                trip_stats.c.total_revenue,
                trip_stats.c.total_cargo,
            )
            .outerjoin(trip_stats, trip_stats.c.driver_id == Driver.id)
            .order_by(Driver.id)
        )
        result = await db.execute(query)

        rows = []
        for row in result.all():
            driver = row.Driver
            total = int(row.total_trips or 0)
            done = int(row.completed_trips or 0)
            rows.append(DriverPerformanceRow(
                driver_id=driver.id,
                name=driver.name,
                license_number=driver.license_number,
                license_expiry=driver.license_expiry,
                category=driver.category.value,
                status=driver.status.value,
                safety_score=driver.safety_score,
                total_trips=total,
                completed_trips=done,
                cancelled_trips=int(row.cancelled_trips or 0),
                active_trips=int(row.active_trips or 0),
                completion_rate=completion_rate(done, total),
                total_distance=float(row.total_distance or 0),
                total_revenue=float(row.total_revenue or 0),
                total_cargo=float(row.total_cargo or 0),
            ))
        return rows
