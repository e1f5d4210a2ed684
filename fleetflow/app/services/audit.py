"""
Audit logging service for tracking fleet state changes and auth events.

Entries are staged on the caller's session so they commit (or roll back)
together with the change they describe.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from fleetflow.app.models.audit_log import AuditLog


# Audit event constants
class AuditAction:
    """Standardized audit action constants."""
    USER_CREATED = "USER_CREATED"
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"
    TOKEN_REVOKED = "TOKEN_REVOKED"

    VEHICLE_CREATED = "VEHICLE_CREATED"
    VEHICLE_UPDATED = "VEHICLE_UPDATED"
    VEHICLE_DELETED = "VEHICLE_DELETED"

    DRIVER_CREATED = "DRIVER_CREATED"
    DRIVER_UPDATED = "DRIVER_UPDATED"
    DRIVER_STATUS_TOGGLED = "DRIVER_STATUS_TOGGLED"
    DRIVER_DELETED = "DRIVER_DELETED"

    TRIP_DISPATCHED = "TRIP_DISPATCHED"
    TRIP_COMPLETED = "TRIP_COMPLETED"
    TRIP_CANCELLED = "TRIP_CANCELLED"

    EXPENSE_LOGGED = "EXPENSE_LOGGED"

    MAINTENANCE_CREATED = "MAINTENANCE_CREATED"
    MAINTENANCE_COMPLETED = "MAINTENANCE_COMPLETED"
    MAINTENANCE_DELETED = "MAINTENANCE_DELETED"


async def log_event(
    db: AsyncSession,
    action: str,
    actor: Optional[Dict[str, Any]] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[int] = None,
    metadata: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None
) -> AuditLog:
    """
    Stage an audit entry on the session.

    Args:
        db: Database session (commit is owned by the caller's unit of work)
        action: Action being performed (use AuditAction constants)
        actor: Authenticated user payload ({"user_id", "sub", ...}), None for system actions
        entity_type: Kind of record touched, e.g. "trip"
        entity_id: ID of the record touched
        metadata: Additional context as JSON
        ip_address: IP address of the request

    Returns:
        Pending AuditLog instance
    """
    actor = actor or {}
    audit_log = AuditLog(
        actor_id=actor.get("user_id"),
        actor_username=actor.get("sub"),
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        meta_data=metadata,
        ip_address=ip_address
    )

    db.add(audit_log)
    await db.flush()

    return audit_log


async def get_audit_trail(
    db: AsyncSession,
    action: Optional[str] = None,
    entity_type: Optional[str] = None,
    limit: int = 100
) -> list[AuditLog]:
    """
    Retrieve audit trail with optional filtering.

    Returns:
        List of AuditLog instances, most recent first
    """
    query = select(AuditLog).order_by(desc(AuditLog.timestamp), desc(AuditLog.id))

    if action:
        query = query.where(AuditLog.action == action)

    if entity_type:
        query = query.where(AuditLog.entity_type == entity_type)

    query = query.limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all())
