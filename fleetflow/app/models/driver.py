"""
Driver database model.
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum
from fleetflow.app.db.session import Base
from fleetflow.app.models.base import timestamp_columns
from fleetflow.app.models.enums import DriverCategory, DriverStatus


class Driver(Base):
    """
    Driver model.

    ON_TRIP is entered only by trip dispatch and left only by trip
    completion or cancellation.
    """
    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    name = Column(String(100), nullable=False)
    license_number = Column(String(50), unique=True, nullable=False, index=True)
    license_expiry = Column(DateTime(timezone=True), nullable=False)
    category = Column(Enum(DriverCategory), nullable=False)

    status = Column(Enum(DriverStatus), default=DriverStatus.ON_DUTY, nullable=False, index=True)
    safety_score = Column(Integer, default=100, nullable=False)

    version = Column(Integer, nullable=False)

    created_at, updated_at = timestamp_columns()

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<Driver(id={self.id}, license='{self.license_number}', status='{self.status.value}')>"
