"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from fleetflow.app.api.v1.endpoints import (
    auth, vehicles, drivers, trips, expenses, maintenance, analytics, audit
)

router = APIRouter()

# Authentication
router.include_router(auth.router)

# Fleet register
router.include_router(vehicles.router)
router.include_router(drivers.router)

# Dispatch
router.include_router(trips.router)

# Costs and service history
router.include_router(expenses.router)
router.include_router(maintenance.router)

# Reporting
router.include_router(analytics.router)
router.include_router(audit.router)
