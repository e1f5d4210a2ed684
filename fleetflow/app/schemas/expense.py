"""
Expense schemas.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from fleetflow.app.models.enums import ExpenseType
from fleetflow.app.schemas.vehicle import VehicleSummary


class ExpenseCreate(BaseModel):
    """Schema for logging an expense."""
    vehicle_id: int
    expense_type: ExpenseType
    liters: float = Field(0, ge=0, description="Fuel volume, 0 for non-fuel expenses")
    cost: float = Field(..., ge=0)
    date: Optional[datetime] = None


class ExpenseResponse(BaseModel):
    id: int
    vehicle_id: int
    expense_type: ExpenseType
    liters: float
    cost: float
    date: datetime
    maintenance_id: Optional[int]
    created_at: datetime
    vehicle: Optional[VehicleSummary] = None

    class Config:
        from_attributes = True


class VehicleExpenseSummary(BaseModel):
    """Expense totals for one vehicle."""
    vehicle_id: int
    vehicle_name: str
    license_plate: str
    total_fuel_cost: float
    total_maintenance_cost: float
    total_cost: float
    total_liters: float
    count: int
