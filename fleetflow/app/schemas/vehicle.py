"""
Vehicle Pydantic schemas.

Defines request and response models for vehicle management.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from fleetflow.app.models.enums import VehicleType, VehicleStatus


class VehicleCreate(BaseModel):
    """Schema for registering a new vehicle."""
    name: str = Field(..., min_length=1, max_length=100)
    license_plate: str = Field(..., min_length=1, max_length=50, description="Unique registration plate")
    vehicle_type: VehicleType
    max_capacity: float = Field(..., gt=0, description="Maximum cargo mass in kg")
    odometer: float = Field(0, ge=0, description="Current odometer reading in km")
    status: VehicleStatus = VehicleStatus.AVAILABLE
    acquisition_cost: float = Field(..., gt=0, description="Purchase cost, basis for ROI")


class VehicleUpdate(BaseModel):
    """
    Schema for a partial vehicle update.

    status is accepted as-is; this path does not apply lifecycle guards.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    license_plate: Optional[str] = Field(None, min_length=1, max_length=50)
    vehicle_type: Optional[VehicleType] = None
    max_capacity: Optional[float] = Field(None, gt=0)
    odometer: Optional[float] = Field(None, ge=0)
    status: Optional[VehicleStatus] = None
    acquisition_cost: Optional[float] = Field(None, gt=0)


class VehicleResponse(BaseModel):
    """Schema for vehicle response."""
    id: int
    name: str
    license_plate: str
    vehicle_type: VehicleType
    max_capacity: float
    odometer: float
    status: VehicleStatus
    acquisition_cost: float
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class VehicleSummary(BaseModel):
    """Vehicle fields embedded in trip, expense and maintenance responses."""
    id: int
    name: str
    license_plate: str
    vehicle_type: VehicleType
    max_capacity: float
    odometer: float
    status: VehicleStatus

    class Config:
        from_attributes = True
