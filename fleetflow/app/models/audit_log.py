"""
Audit Log Database Model.

Tracks fleet state changes and authentication events.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from fleetflow.app.db.session import Base
from fleetflow.app.models.base import utcnow


class AuditLog(Base):
    """
    Audit log model.

    Events logged:
    - VEHICLE_* / DRIVER_* record changes
    - TRIP_DISPATCHED / TRIP_COMPLETED / TRIP_CANCELLED
    - EXPENSE_LOGGED, MAINTENANCE_*
    - LOGIN_SUCCESS / LOGIN_FAILED / TOKEN_REVOKED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action (None for system actions)
    actor_id = Column(Integer, index=True, nullable=True)
    actor_username = Column(String(255), nullable=True)

    # What action was performed
    action = Column(String(100), nullable=False, index=True)

    # Which record it touched
    entity_type = Column(String(50), nullable=True, index=True)
    entity_id = Column(Integer, nullable=True)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    ip_address = Column(String(50), nullable=True)

    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', entity={self.entity_type}:{self.entity_id})>"
