"""
Trip API Endpoints.

Dispatch board: create (dispatch), complete and cancel trips.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from fleetflow.app.db.session import get_db
from fleetflow.app.core.guards import require_role
from fleetflow.app.domain.fleet.trip_service import TripService
from fleetflow.app.models.enums import TripStatus
from fleetflow.app.schemas.trip import TripDispatch, TripComplete, TripResponse

router = APIRouter(prefix="/trips", tags=["Trips"])


@router.get("", response_model=List[TripResponse])
async def list_trips(
    status_filter: Optional[TripStatus] = Query(None, alias="status"),
    current_user: dict = Depends(require_role("trip:read")),
    db: AsyncSession = Depends(get_db)
):
    """List trips newest first with vehicle and driver details."""
    return await TripService.list_trips(db, status_filter)


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(
    trip_id: int,
    current_user: dict = Depends(require_role("trip:read")),
    db: AsyncSession = Depends(get_db)
):
    return await TripService.get(db, trip_id)


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def dispatch_trip(
    trip_data: TripDispatch,
    current_user: dict = Depends(require_role("trip:dispatch")),
    db: AsyncSession = Depends(get_db)
):
    """
    Create and dispatch a trip.

    The vehicle must be Available, the driver OnDuty with a valid license,
    and the cargo within the vehicle's capacity. On success both go OnTrip.
    """
    return await TripService.dispatch(db, trip_data, current_user)


@router.put("/{trip_id}/complete", response_model=TripResponse)
async def complete_trip(
    trip_id: int,
    completion: Optional[TripComplete] = None,
    current_user: dict = Depends(require_role("trip:complete")),
    db: AsyncSession = Depends(get_db)
):
    """Complete a dispatched trip at the given end odometer reading."""
    return await TripService.complete(db, trip_id, completion or TripComplete(), current_user)


@router.put("/{trip_id}/cancel", response_model=TripResponse)
async def cancel_trip(
    trip_id: int,
    current_user: dict = Depends(require_role("trip:cancel")),
    db: AsyncSession = Depends(get_db)
):
    return await TripService.cancel(db, trip_id, current_user)
