"""
Maintenance service log schemas.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from fleetflow.app.models.enums import MaintenanceType, MaintenanceStatus, VehicleType, VehicleStatus
from fleetflow.app.schemas.vehicle import VehicleSummary


class MaintenanceCreate(BaseModel):
    """Schema for opening a service log."""
    vehicle_id: int
    maintenance_type: MaintenanceType
    description: str = Field(..., min_length=1, max_length=500)
    cost: float = Field(..., ge=0)
    scheduled_date: Optional[datetime] = None
    odometer_at_service: Optional[float] = Field(None, ge=0, description="Defaults to the vehicle odometer")
    notes: Optional[str] = None


class MaintenanceComplete(BaseModel):
    """Optional overrides applied when a service is completed."""
    notes: Optional[str] = None
    cost: Optional[float] = Field(None, ge=0)


class MaintenanceResponse(BaseModel):
    id: int
    vehicle_id: int
    maintenance_type: MaintenanceType
    description: str
    cost: float
    status: MaintenanceStatus
    scheduled_date: datetime
    completed_date: Optional[datetime]
    odometer_at_service: float
    notes: str
    created_at: datetime
    updated_at: datetime
    vehicle: Optional[VehicleSummary] = None

    class Config:
        from_attributes = True


class VehicleMaintenanceSummary(BaseModel):
    """Service history totals for one vehicle."""
    vehicle_id: int
    vehicle_name: str
    license_plate: str
    vehicle_type: VehicleType
    vehicle_status: VehicleStatus
    total_cost: float
    total_logs: int
    completed_logs: int
    in_progress_logs: int
    last_service: Optional[datetime]
