"""
Driver Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from fleetflow.app.models.enums import DriverCategory, DriverStatus


class DriverCreate(BaseModel):
    """Schema for registering a new driver."""
    name: str = Field(..., min_length=1, max_length=100)
    license_number: str = Field(..., min_length=1, max_length=50, description="Unique license number")
    license_expiry: datetime
    category: DriverCategory
    status: DriverStatus = DriverStatus.ON_DUTY
    safety_score: int = Field(100, ge=0, le=100)


class DriverUpdate(BaseModel):
    """Schema for a partial driver update."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    license_number: Optional[str] = Field(None, min_length=1, max_length=50)
    license_expiry: Optional[datetime] = None
    category: Optional[DriverCategory] = None
    status: Optional[DriverStatus] = None
    safety_score: Optional[int] = Field(None, ge=0, le=100)


class DriverResponse(BaseModel):
    """Schema for driver response."""
    id: int
    name: str
    license_number: str
    license_expiry: datetime
    category: DriverCategory
    status: DriverStatus
    safety_score: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DriverSummary(BaseModel):
    """Driver fields embedded in trip responses."""
    id: int
    name: str
    license_number: str
    status: DriverStatus

    class Config:
        from_attributes = True
