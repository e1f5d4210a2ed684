"""
Expense API Endpoints.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from fleetflow.app.db.session import get_db
from fleetflow.app.core.guards import require_role
from fleetflow.app.domain.fleet.expense_service import ExpenseService
from fleetflow.app.models.enums import ExpenseType
from fleetflow.app.schemas.expense import ExpenseCreate, ExpenseResponse, VehicleExpenseSummary

router = APIRouter(prefix="/expenses", tags=["Expenses"])


@router.get("", response_model=List[ExpenseResponse])
async def list_expenses(
    vehicle_id: Optional[int] = Query(None),
    expense_type: Optional[ExpenseType] = Query(None, alias="type"),
    current_user: dict = Depends(require_role("expense:read")),
    db: AsyncSession = Depends(get_db)
):
    """List expenses, most recent first."""
    return await ExpenseService.list_expenses(db, vehicle_id, expense_type)


@router.get("/by-vehicle", response_model=List[VehicleExpenseSummary])
async def expenses_by_vehicle(
    current_user: dict = Depends(require_role("expense:read")),
    db: AsyncSession = Depends(get_db)
):
    """Fuel, maintenance and total cost per vehicle."""
    return await ExpenseService.summary_by_vehicle(db)


@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    expense_id: int,
    current_user: dict = Depends(require_role("expense:read")),
    db: AsyncSession = Depends(get_db)
):
    return await ExpenseService.get(db, expense_id)


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_data: ExpenseCreate,
    current_user: dict = Depends(require_role("expense:create")),
    db: AsyncSession = Depends(get_db)
):
    """
    Log a fuel or maintenance expense.

    A Maintenance expense also puts the vehicle InShop.
    """
    return await ExpenseService.log_expense(db, expense_data, current_user)
