"""
Trip database model.

A trip pairs one vehicle and one driver carrying cargo between two
odometer readings.
"""

from sqlalchemy import Column, Integer, String, Float, ForeignKey, Enum
from sqlalchemy.orm import relationship
from fleetflow.app.db.session import Base
from fleetflow.app.models.base import timestamp_columns
from fleetflow.app.models.enums import TripStatus


class Trip(Base):
    """
    Trip model.

    distance and end_odometer are only set on completion; distance is
    end_odometer - start_odometer and always positive.
    """
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    vehicle_id = Column(Integer, ForeignKey('vehicles.id'), nullable=False, index=True)
    driver_id = Column(Integer, ForeignKey('drivers.id'), nullable=False, index=True)

    cargo_weight = Column(Float, nullable=False)
    origin = Column(String(255), default="", nullable=False)
    destination = Column(String(255), default="", nullable=False)

    # Odometer snapshots
    start_odometer = Column(Float, nullable=False)
    end_odometer = Column(Float, nullable=True)
    distance = Column(Float, default=0, nullable=False)

    revenue = Column(Float, default=0, nullable=False)

    status = Column(Enum(TripStatus), default=TripStatus.DRAFT, nullable=False, index=True)

    version = Column(Integer, nullable=False)

    created_at, updated_at = timestamp_columns()

    vehicle = relationship("Vehicle")
    driver = relationship("Driver")

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<Trip(id={self.id}, vehicle_id={self.vehicle_id}, status='{self.status.value}')>"
