"""
Driver Service (Domain Logic).

Driver registration, edits and the duty-status toggle.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.core.exceptions import ConflictError, ValidationError
from fleetflow.app.db.session import unit_of_work
from fleetflow.app.domain.fleet.rules import DRIVER_TOGGLE_TRANSITIONS, get_or_404
from fleetflow.app.models.driver import Driver
from fleetflow.app.models.enums import DriverStatus
from fleetflow.app.models.trip import Trip
from fleetflow.app.schemas.driver import DriverCreate, DriverUpdate
from fleetflow.app.services.audit import log_event, AuditAction

logger = logging.getLogger(__name__)


def next_duty_status(current: DriverStatus) -> DriverStatus:
    """
    Resolve the status a duty toggle moves a driver to.

    Raises:
        ConflictError: driver is on a trip
    """
    target = DRIVER_TOGGLE_TRANSITIONS.get(current)
    if target is None:
        raise ConflictError(
            "Cannot change status while driver is on a trip",
            details={"current_status": current.value}
        )
    return target


class DriverService:

    @staticmethod
    async def list_drivers(db: AsyncSession, status: Optional[DriverStatus] = None) -> List[Driver]:
        query = select(Driver).order_by(Driver.created_at.desc(), Driver.id.desc())
        if status is not None:
            query = query.where(Driver.status == status)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get(db: AsyncSession, driver_id: int) -> Driver:
        return await get_or_404(db, Driver, driver_id, "Driver")

    @staticmethod
    async def register(db: AsyncSession, data: DriverCreate, actor: Dict[str, Any]) -> Driver:
        """
        Register a new driver.

        Raises:
            ValidationError: license number already registered
        """
        await _ensure_license_free(db, data.license_number)

        async with unit_of_work(db):
            driver = Driver(**data.model_dump())
            db.add(driver)
            await db.flush()

            await log_event(
                db=db,
                action=AuditAction.DRIVER_CREATED,
                actor=actor,
                entity_type="driver",
                entity_id=driver.id,
                metadata={"license_number": driver.license_number}
            )

        logger.info("Driver %s registered (license=%s)", driver.id, driver.license_number)
        return driver

    @staticmethod
    async def update(db: AsyncSession, driver_id: int, data: DriverUpdate, actor: Dict[str, Any]) -> Driver:
        driver = await DriverService.get(db, driver_id)

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)

        new_license = update_data.get("license_number")
        if new_license and new_license != driver.license_number:
            await _ensure_license_free(db, new_license, exclude_id=driver.id)

        async with unit_of_work(db):
            for field, value in update_data.items():
                setattr(driver, field, value)

            await log_event(
                db=db,
                action=AuditAction.DRIVER_UPDATED,
                actor=actor,
                entity_type="driver",
                entity_id=driver.id,
                metadata={"updated_fields": sorted(update_data.keys())}
            )

        logger.info("Driver %s updated: %s", driver.id, sorted(update_data.keys()))
        return driver

    @staticmethod
    async def toggle_status(db: AsyncSession, driver_id: int, actor: Dict[str, Any]) -> Driver:
        """
        Flip a driver between on and off duty.

        OnDuty -> OffDuty, OffDuty -> OnDuty, Suspended -> OnDuty.

        Raises:
            ResourceNotFoundError: unknown driver
            ConflictError: driver is on a trip
        """
        driver = await DriverService.get(db, driver_id)
        previous = driver.status
        target = next_duty_status(previous)

        async with unit_of_work(db):
            driver.status = target
            await log_event(
                db=db,
                action=AuditAction.DRIVER_STATUS_TOGGLED,
                actor=actor,
                entity_type="driver",
                entity_id=driver.id,
                metadata={"from": previous.value, "to": target.value}
            )

        logger.info("Driver %s status %s -> %s", driver.id, previous.value, target.value)
        return driver

    @staticmethod
    async def delete(db: AsyncSession, driver_id: int, actor: Dict[str, Any]) -> None:
        """
        Remove a driver with no trip history.

        Raises:
            ResourceNotFoundError: unknown driver
            ConflictError: trips still reference the driver
        """
        driver = await DriverService.get(db, driver_id)

        trip_count = (await db.execute(
            select(func.count(Trip.id)).where(Trip.driver_id == driver_id)
        )).scalar() or 0
        if trip_count:
            raise ConflictError(
                "Driver has trip history; suspend the driver instead",
                details={"trips": trip_count}
            )

        async with unit_of_work(db):
            await db.delete(driver)
            await log_event(
                db=db,
                action=AuditAction.DRIVER_DELETED,
                actor=actor,
                entity_type="driver",
                entity_id=driver_id,
                metadata={"license_number": driver.license_number}
            )

        logger.info("Driver %s deleted", driver_id)


async def _ensure_license_free(db: AsyncSession, license_number: str, exclude_id: Optional[int] = None) -> None:
    query = select(Driver.id).where(Driver.license_number == license_number)
    if exclude_id is not None:
        query = query.where(Driver.id != exclude_id)
    if (await db.execute(query)).first():
        message = "Driver with this license number already exists"
        if exclude_id is not None:
            message = "License number already in use"
        raise ValidationError(message, details={"license_number": license_number})
