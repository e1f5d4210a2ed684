"""
Maintenance service log database model.
"""

from sqlalchemy import Column, Integer, String, Float, Text, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from fleetflow.app.db.session import Base
from fleetflow.app.models.base import timestamp_columns, utcnow
from fleetflow.app.models.enums import MaintenanceType, MaintenanceStatus


class MaintenanceLog(Base):
    """
    Maintenance log model.

    An IN_PROGRESS log keeps its vehicle IN_SHOP until the log is completed
    or deleted.
    """
    __tablename__ = "maintenance_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    vehicle_id = Column(Integer, ForeignKey('vehicles.id'), nullable=False, index=True)

    maintenance_type = Column(Enum(MaintenanceType), nullable=False, index=True)
    description = Column(String(500), nullable=False)
    cost = Column(Float, nullable=False)

    status = Column(Enum(MaintenanceStatus), default=MaintenanceStatus.IN_PROGRESS, nullable=False, index=True)

    scheduled_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    completed_date = Column(DateTime(timezone=True), nullable=True)
    odometer_at_service = Column(Float, default=0, nullable=False)
    notes = Column(Text, default="", nullable=False)

    version = Column(Integer, nullable=False)

    created_at, updated_at = timestamp_columns()

    vehicle = relationship("Vehicle")

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<MaintenanceLog(id={self.id}, vehicle_id={self.vehicle_id}, status='{self.status.value}')>"
