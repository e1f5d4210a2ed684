"""
Trip schemas.

Schemas for dispatch, completion and trip visibility.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from fleetflow.app.models.enums import TripStatus
from fleetflow.app.schemas.vehicle import VehicleSummary
from fleetflow.app.schemas.driver import DriverSummary


class TripDispatch(BaseModel):
    """Schema for creating and dispatching a trip."""
    vehicle_id: int
    driver_id: int
    cargo_weight: float = Field(..., gt=0, description="Cargo mass in kg")
    origin: Optional[str] = Field(None, max_length=255)
    destination: Optional[str] = Field(None, max_length=255)
    revenue: Optional[float] = Field(None, ge=0)


class TripComplete(BaseModel):
    """
    Schema for completing a dispatched trip.

    end_odometer is optional here so a missing reading is reported as a
    business-rule failure rather than a schema error.
    """
    end_odometer: Optional[float] = None
    revenue: Optional[float] = Field(None, ge=0)


class TripResponse(BaseModel):
    """Schema for trip response, with vehicle and driver populated."""
    id: int
    vehicle_id: int
    driver_id: int
    cargo_weight: float
    origin: str
    destination: str
    start_odometer: float
    end_odometer: Optional[float]
    distance: float
    revenue: float
    status: TripStatus
    created_at: datetime
    updated_at: datetime
    vehicle: Optional[VehicleSummary] = None
    driver: Optional[DriverSummary] = None

    class Config:
        from_attributes = True
