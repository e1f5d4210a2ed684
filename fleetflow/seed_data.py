"""
Database seeding script for demo data.

Creates one user per role, two vehicles, two drivers, a completed trip and a
few expenses. Run with ``python -m fleetflow.seed_data`` against an empty
database.
"""

import asyncio
from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from fleetflow.app.db.session import AsyncSessionLocal, Base, engine
from fleetflow.app.models.base import utcnow
from fleetflow.app.models.enums import (
    DriverCategory, DriverStatus, ExpenseType, TripStatus, UserRole, VehicleStatus, VehicleType
)
from fleetflow.app.models.user import User
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.models.driver import Driver
from fleetflow.app.models.trip import Trip
from fleetflow.app.models.maintenance import MaintenanceLog  # noqa: F401
from fleetflow.app.models.expense import Expense
from fleetflow.app.models.audit_log import AuditLog  # noqa: F401
from fleetflow.app.core.security import get_password_hash

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    ("Alice Manager", "manager@fleetflow.com", UserRole.MANAGER),
    ("Bob Dispatcher", "dispatcher@fleetflow.com", UserRole.DISPATCHER),
    ("Carol Safety", "safety@fleetflow.com", UserRole.SAFETY),
    ("Dave Finance", "finance@fleetflow.com", UserRole.FINANCE),
]


async def seed_data():
    """
    Seed demo records.

    Skips everything if the manager account already exists.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("Starting seed...")

        result = await db.execute(select(User).where(User.email == "manager@fleetflow.com"))
        if result.scalar_one_or_none():
            print("Demo data already present, skipping seeding")
            return

        hashed = get_password_hash(DEMO_PASSWORD)
        for name, email, role in DEMO_USERS:
            db.add(User(name=name, email=email, hashed_password=hashed, role=role))
        print(f"Created {len(DEMO_USERS)} users")

        van = Vehicle(
            name="City Van",
            license_plate="VAN-001",
            vehicle_type=VehicleType.VAN,
            max_capacity=500,
            odometer=12500,
            status=VehicleStatus.AVAILABLE,
            acquisition_cost=35000,
        )
        truck = Vehicle(
            name="Heavy Hauler",
            license_plate="TRK-001",
            vehicle_type=VehicleType.TRUCK,
            max_capacity=2000,
            odometer=45000,
            status=VehicleStatus.AVAILABLE,
            acquisition_cost=85000,
        )
        db.add_all([van, truck])

        license_expiry = utcnow() + timedelta(days=365)
        john = Driver(
            name="John Smith",
            license_number="DL-VAN-1001",
            license_expiry=license_expiry,
            category=DriverCategory.VAN,
            status=DriverStatus.ON_DUTY,
            safety_score=92,
        )
        maria = Driver(
            name="Maria Garcia",
            license_number="DL-TRK-2001",
            license_expiry=license_expiry,
            category=DriverCategory.TRUCK,
            status=DriverStatus.ON_DUTY,
            safety_score=88,
        )
        db.add_all([john, maria])
        await db.flush()
        print("Created 2 vehicles and 2 drivers")

        db.add(Trip(
            vehicle_id=truck.id,
            driver_id=maria.id,
            cargo_weight=1500,
            status=TripStatus.COMPLETED,
            start_odometer=44000,
            end_odometer=45000,
            distance=1000,
            revenue=5000,
        ))

        db.add_all([
            Expense(
                vehicle_id=truck.id, expense_type=ExpenseType.FUEL, liters=120, cost=180,
                date=datetime(2026, 2, 15, tzinfo=timezone.utc)
            ),
            Expense(
                vehicle_id=van.id, expense_type=ExpenseType.FUEL, liters=45, cost=67.5,
                date=datetime(2026, 2, 18, tzinfo=timezone.utc)
            ),
            Expense(
                vehicle_id=van.id, expense_type=ExpenseType.MAINTENANCE, liters=0, cost=350,
                date=datetime(2026, 2, 10, tzinfo=timezone.utc)
            ),
        ])

        await db.commit()

        print("\nSeed complete. Demo accounts:")
        for _, email, _ in DEMO_USERS:
            print(f"  {email} / {DEMO_PASSWORD}")


if __name__ == "__main__":
    asyncio.run(seed_data())
