"""
Maintenance API Endpoints.

Service logs: open, complete and delete, plus per-vehicle totals.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from fleetflow.app.db.session import get_db
from fleetflow.app.core.guards import require_role
from fleetflow.app.domain.fleet.maintenance_service import MaintenanceService
from fleetflow.app.models.enums import MaintenanceStatus, MaintenanceType
from fleetflow.app.schemas.common import MessageResponse
from fleetflow.app.schemas.maintenance import (
    MaintenanceCreate, MaintenanceComplete, MaintenanceResponse, VehicleMaintenanceSummary
)

router = APIRouter(prefix="/maintenance", tags=["Maintenance"])


@router.get("", response_model=List[MaintenanceResponse])
async def list_maintenance(
    vehicle_id: Optional[int] = Query(None),
    status_filter: Optional[MaintenanceStatus] = Query(None, alias="status"),
    maintenance_type: Optional[MaintenanceType] = Query(None, alias="type"),
    current_user: dict = Depends(require_role("maintenance:read")),
    db: AsyncSession = Depends(get_db)
):
    return await MaintenanceService.list_logs(db, vehicle_id, status_filter, maintenance_type)


@router.get("/summary", response_model=List[VehicleMaintenanceSummary])
async def maintenance_summary(
    current_user: dict = Depends(require_role("maintenance:read")),
    db: AsyncSession = Depends(get_db)
):
    """Service cost and log counts per vehicle."""
    return await MaintenanceService.summary_by_vehicle(db)


@router.get("/{log_id}", response_model=MaintenanceResponse)
async def get_maintenance(
    log_id: int,
    current_user: dict = Depends(require_role("maintenance:read")),
    db: AsyncSession = Depends(get_db)
):
    return await MaintenanceService.get(db, log_id)


@router.post("", response_model=MaintenanceResponse, status_code=status.HTTP_201_CREATED)
async def create_maintenance(
    log_data: MaintenanceCreate,
    current_user: dict = Depends(require_role("maintenance:create")),
    db: AsyncSession = Depends(get_db)
):
    """
    Open a service log.

    The vehicle goes InShop and a Maintenance expense is booked for the cost.
    """
    return await MaintenanceService.create(db, log_data, current_user)


@router.put("/{log_id}/complete", response_model=MaintenanceResponse)
async def complete_maintenance(
    log_id: int,
    completion: Optional[MaintenanceComplete] = None,
    current_user: dict = Depends(require_role("maintenance:complete")),
    db: AsyncSession = Depends(get_db)
):
    """Complete a service log and release the vehicle if it is still InShop."""
    return await MaintenanceService.complete(db, log_id, completion or MaintenanceComplete(), current_user)


@router.delete("/{log_id}", response_model=MessageResponse)
async def delete_maintenance(
    log_id: int,
    current_user: dict = Depends(require_role("maintenance:delete")),
    db: AsyncSession = Depends(get_db)
):
    await MaintenanceService.delete(db, log_id, current_user)
    return MessageResponse(message="Maintenance log deleted")
