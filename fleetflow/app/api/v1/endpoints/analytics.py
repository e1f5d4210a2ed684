"""
Analytics API Endpoints.

Read-only dashboard and financial reports for managers and finance.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from fleetflow.app.db.session import get_db
from fleetflow.app.core.guards import require_role
from fleetflow.app.services.analytics import AnalyticsService
from fleetflow.app.services.csv_export import (
    FUEL_CSV_FILENAME, ROI_CSV_FILENAME, fuel_efficiency_csv, vehicle_roi_csv
)
from fleetflow.app.schemas.analytics import (
    DashboardStats, FuelEfficiencyRow, VehicleROIRow, DriverPerformanceRow
)

router = APIRouter(prefix="/analytics", tags=["Analytics"])


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


@router.get("/dashboard", response_model=DashboardStats)
async def get_dashboard(
    current_user: dict = Depends(require_role("analytics:read")),
    db: AsyncSession = Depends(get_db)
):
    """Vehicle, driver and trip counts plus fleet utilization."""
    return await AnalyticsService.get_dashboard_stats(db)


@router.get("/fuel-efficiency", response_model=List[FuelEfficiencyRow])
async def get_fuel_efficiency(
    current_user: dict = Depends(require_role("analytics:read")),
    db: AsyncSession = Depends(get_db)
):
    return await AnalyticsService.get_fuel_efficiency(db)


@router.get("/vehicle-roi", response_model=List[VehicleROIRow])
async def get_vehicle_roi(
    current_user: dict = Depends(require_role("analytics:read")),
    db: AsyncSession = Depends(get_db)
):
    return await AnalyticsService.get_vehicle_roi(db)


@router.get("/driver-performance", response_model=List[DriverPerformanceRow])
async def get_driver_performance(
    current_user: dict = Depends(require_role("analytics:read")),
    db: AsyncSession = Depends(get_db)
):
    return await AnalyticsService.get_driver_performance(db)


@router.get("/export/fuel-csv")
async def export_fuel_csv(
    current_user: dict = Depends(require_role("analytics:export")),
    db: AsyncSession = Depends(get_db)
):
    """Download the fuel-efficiency report as CSV."""
    rows = await AnalyticsService.get_fuel_efficiency(db)
    return _csv_response(fuel_efficiency_csv(rows), FUEL_CSV_FILENAME)


@router.get("/export/roi-csv")
async def export_roi_csv(
    current_user: dict = Depends(require_role("analytics:export")),
    db: AsyncSession = Depends(get_db)
):
    """Download the vehicle ROI report as CSV."""
    rows = await AnalyticsService.get_vehicle_roi(db)
    return _csv_response(vehicle_roi_csv(rows), ROI_CSV_FILENAME)
