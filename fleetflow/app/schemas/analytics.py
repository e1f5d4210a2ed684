"""
Analytics Schemas.

Read-only report shapes for the dashboard and financial reports.
"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class DashboardStats(BaseModel):
    """Fleet-wide counts and utilization."""
    total_vehicles: int
    available_vehicles: int
    on_trip_vehicles: int
    in_shop_vehicles: int
    retired_vehicles: int
    active_fleet: int
    utilization: int  # percent of the non-retired fleet currently on a trip

    total_drivers: int
    on_duty_drivers: int
    off_duty_drivers: int
    suspended_drivers: int
    on_trip_drivers: int

    total_trips: int
    pending_trips: int  # dispatched, not yet closed
    completed_trips: int
    cancelled_trips: int


class FuelEfficiencyRow(BaseModel):
    """Distance per liter for a vehicle with at least one completed trip."""
    vehicle_id: int
    vehicle_name: str
    license_plate: str
    vehicle_type: Optional[str]
    total_distance: float
    total_liters: float
    total_fuel_cost: float
    efficiency: float  # km per liter
    trip_count: int
    total_revenue: float


class VehicleROIRow(BaseModel):
    """Return on acquisition cost for one vehicle."""
    vehicle_id: int
    vehicle_name: str
    license_plate: str
    vehicle_type: str
    acquisition_cost: float
    total_revenue: float
    total_fuel_cost: float
    total_maintenance_cost: float
    total_expenses: float
    total_distance: float
    roi: float  # percent


class DriverPerformanceRow(BaseModel):
    """Trip outcomes for one driver."""
    driver_id: int
    name: str
    license_number: str
    license_expiry: datetime
    category: str
    status: str
    safety_score: int
    total_trips: int
    completed_trips: int
    cancelled_trips: int
    active_trips: int
    completion_rate: int  # percent
    total_distance: float
    total_revenue: float
    total_cargo: float
