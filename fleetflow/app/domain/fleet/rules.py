"""
Shared fleet rules: transition tables and record loaders.
"""

from typing import Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.core.exceptions import ResourceNotFoundError
from fleetflow.app.models.enums import DriverStatus

ModelT = TypeVar("ModelT")


# Duty toggle. ON_TRIP has no entry: only the trip lifecycle moves a driver out of it.
DRIVER_TOGGLE_TRANSITIONS = {
    DriverStatus.ON_DUTY: DriverStatus.OFF_DUTY,
    DriverStatus.OFF_DUTY: DriverStatus.ON_DUTY,
    DriverStatus.SUSPENDED: DriverStatus.ON_DUTY,
}


def plain_number(value):
    """Render integral floats without a decimal point (600.0 -> 600)."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


async def load_for_update(db: AsyncSession, model: Type[ModelT], record_id: int) -> Optional[ModelT]:
    """
    Load a row and lock it for the rest of the transaction.

    Backends without row locks (SQLite) fall back to the optimistic version
    check on flush.
    """
    result = await db.execute(
        select(model)
        .where(model.id == record_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_or_404(db: AsyncSession, model: Type[ModelT], record_id: int, resource: str) -> ModelT:
    record = await db.get(model, record_id)
    if record is None:
        raise ResourceNotFoundError(resource, record_id)
    return record
