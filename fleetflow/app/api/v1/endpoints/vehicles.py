"""
Vehicle API Endpoints.

Fleet register: list, view, register, edit and remove vehicles.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from fleetflow.app.db.session import get_db
from fleetflow.app.core.guards import require_role
from fleetflow.app.domain.fleet.vehicle_service import VehicleService
from fleetflow.app.models.enums import VehicleStatus
from fleetflow.app.schemas.common import MessageResponse
from fleetflow.app.schemas.vehicle import VehicleCreate, VehicleUpdate, VehicleResponse

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])


@router.get("", response_model=List[VehicleResponse])
async def list_vehicles(
    status_filter: Optional[VehicleStatus] = Query(None, alias="status"),
    current_user: dict = Depends(require_role("vehicle:read")),
    db: AsyncSession = Depends(get_db)
):
    """List all vehicles, optionally only those in one status."""
    return await VehicleService.list_vehicles(db, status_filter)


@router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(
    vehicle_id: int,
    current_user: dict = Depends(require_role("vehicle:read")),
    db: AsyncSession = Depends(get_db)
):
    return await VehicleService.get(db, vehicle_id)


@router.post("", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    vehicle_data: VehicleCreate,
    current_user: dict = Depends(require_role("vehicle:create")),
    db: AsyncSession = Depends(get_db)
):
    """Register a vehicle. The license plate must be unused."""
    return await VehicleService.register(db, vehicle_data, current_user)


@router.put("/{vehicle_id}", response_model=VehicleResponse)
async def update_vehicle(
    vehicle_id: int,
    vehicle_data: VehicleUpdate,
    current_user: dict = Depends(require_role("vehicle:update")),
    db: AsyncSession = Depends(get_db)
):
    """
    Update vehicle fields.

    Only provided fields are changed. Setting status here skips the trip and
    maintenance lifecycle checks.
    """
    return await VehicleService.update(db, vehicle_id, vehicle_data, current_user)


@router.delete("/{vehicle_id}", response_model=MessageResponse)
async def delete_vehicle(
    vehicle_id: int,
    current_user: dict = Depends(require_role("vehicle:delete")),
    db: AsyncSession = Depends(get_db)
):
    await VehicleService.delete(db, vehicle_id, current_user)
    return MessageResponse(message="Vehicle deleted")
