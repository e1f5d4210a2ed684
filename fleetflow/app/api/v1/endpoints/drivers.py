"""
Driver API Endpoints.

Driver roster management and the duty-status toggle.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from fleetflow.app.db.session import get_db
from fleetflow.app.core.guards import require_role
from fleetflow.app.domain.fleet.driver_service import DriverService
from fleetflow.app.models.enums import DriverStatus
from fleetflow.app.schemas.common import MessageResponse
from fleetflow.app.schemas.driver import DriverCreate, DriverUpdate, DriverResponse

router = APIRouter(prefix="/drivers", tags=["Drivers"])


@router.get("", response_model=List[DriverResponse])
async def list_drivers(
    status_filter: Optional[DriverStatus] = Query(None, alias="status"),
    current_user: dict = Depends(require_role("driver:read")),
    db: AsyncSession = Depends(get_db)
):
    return await DriverService.list_drivers(db, status_filter)


@router.get("/{driver_id}", response_model=DriverResponse)
async def get_driver(
    driver_id: int,
    current_user: dict = Depends(require_role("driver:read")),
    db: AsyncSession = Depends(get_db)
):
    return await DriverService.get(db, driver_id)


@router.post("", response_model=DriverResponse, status_code=status.HTTP_201_CREATED)
async def create_driver(
    driver_data: DriverCreate,
    current_user: dict = Depends(require_role("driver:create")),
    db: AsyncSession = Depends(get_db)
):
    """Register a driver. The license number must be unused."""
    return await DriverService.register(db, driver_data, current_user)


@router.put("/{driver_id}", response_model=DriverResponse)
async def update_driver(
    driver_id: int,
    driver_data: DriverUpdate,
    current_user: dict = Depends(require_role("driver:update")),
    db: AsyncSession = Depends(get_db)
):
    return await DriverService.update(db, driver_id, driver_data, current_user)


@router.put("/{driver_id}/toggle-status", response_model=DriverResponse)
async def toggle_driver_status(
    driver_id: int,
    current_user: dict = Depends(require_role("driver:toggle_status")),
    db: AsyncSession = Depends(get_db)
):
    """
    Toggle duty status.

    OnDuty and OffDuty swap, Suspended returns to OnDuty. Rejected while
    the driver is on a trip.
    """
    return await DriverService.toggle_status(db, driver_id, current_user)


@router.delete("/{driver_id}", response_model=MessageResponse)
async def delete_driver(
    driver_id: int,
    current_user: dict = Depends(require_role("driver:delete")),
    db: AsyncSession = Depends(get_db)
):
    await DriverService.delete(db, driver_id, current_user)
    return MessageResponse(message="Driver deleted")
