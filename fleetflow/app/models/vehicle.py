"""
Vehicle database model.

A vehicle carries cargo on trips; its status is driven by the trip and
maintenance lifecycles.
"""

from sqlalchemy import Column, Integer, String, Float, Enum
from fleetflow.app.db.session import Base
from fleetflow.app.models.base import timestamp_columns
from fleetflow.app.models.enums import VehicleType, VehicleStatus


class Vehicle(Base):
    """
    Vehicle model.

    The license plate is unique across the fleet. The odometer only moves
    forward through completed trips (or direct edits).
    """
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Identification
    name = Column(String(100), nullable=False)
    license_plate = Column(String(50), unique=True, nullable=False, index=True)
    vehicle_type = Column(Enum(VehicleType), nullable=False)

    # Capacity (kg) and running distance reading (km)
    max_capacity = Column(Float, nullable=False)
    odometer = Column(Float, default=0, nullable=False)

    # Lifecycle
    status = Column(Enum(VehicleStatus), default=VehicleStatus.AVAILABLE, nullable=False, index=True)

    # Monetary basis for ROI
    acquisition_cost = Column(Float, nullable=False)

    # Optimistic concurrency counter
    version = Column(Integer, nullable=False)

    created_at, updated_at = timestamp_columns()

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<Vehicle(id={self.id}, plate='{self.license_plate}', status='{self.status.value}')>"
