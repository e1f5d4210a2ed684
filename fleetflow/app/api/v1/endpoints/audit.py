"""
Audit trail API Endpoints (manager only).
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from fleetflow.app.db.session import get_db
from fleetflow.app.core.guards import require_role
from fleetflow.app.schemas.audit import AuditLogResponse
from fleetflow.app.services.audit import get_audit_trail

router = APIRouter(prefix="/audit", tags=["Audit"])


@router.get("", response_model=List[AuditLogResponse])
async def list_audit_logs(
    action: Optional[str] = Query(None, description="e.g. TRIP_DISPATCHED"),
    entity_type: Optional[str] = Query(None, description="e.g. trip"),
    limit: int = Query(100, ge=1, le=500),
    current_user: dict = Depends(require_role("audit:read")),
    db: AsyncSession = Depends(get_db)
):
    """Most recent audit entries first."""
    return await get_audit_trail(db, action=action, entity_type=entity_type, limit=limit)
