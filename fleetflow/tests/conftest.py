"""
Centralized Test Configuration.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import Pool, StaticPool

from fleetflow.app.main import app
from fleetflow.app.db.session import get_db, Base
from fleetflow.app.core.redis_client import get_redis
from fleetflow.app.core.jwt import create_access_token
from fleetflow.app.core.security import get_password_hash
from fleetflow.app.models.base import utcnow
from fleetflow.app.models.enums import UserRole
from fleetflow.app.models.user import User
import fleetflow.app.core.redis_client as redis_client_module

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "password123"


@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)).lower():
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self._closed = False

    async def ping(self):
        if self._closed:
            return False
        return True

    async def get(self, key):
        if self._closed:
            return None
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        if self._closed:
            return False
        self.store[key] = value
        return True

    async def setex(self, key, ttl, value):
        return await self.set(key, value, ex=ttl)

    async def delete(self, key):
        if self._closed:
            return 0
        if key in self.store:
            del self.store[key]
            return 1
        return 0

    async def exists(self, key):
        if self._closed:
            return 0
        return 1 if key in self.store else 0

    async def flushdb(self):
        if not self._closed:
            self.store = {}

    async def aclose(self):
        self._closed = True
        self.store = {}


@pytest.fixture
def mock_redis():
    return MockRedis()


@pytest.fixture(autouse=True)
def apply_overrides(mock_redis):
    """Point the app at the test database and the in-process Redis."""
    original_client = redis_client_module.redis_client
    redis_client_module.redis_client = mock_redis

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    async def override_get_redis():
        return mock_redis

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    yield

    # Restore and clear
    app.dependency_overrides = {}
    redis_client_module.redis_client = original_client


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture(scope="session")
def password_hash():
    # bcrypt is slow, hash once
    return get_password_hash(TEST_PASSWORD)


@pytest.fixture
async def users(db_session, password_hash):
    """One active user per role, keyed by role."""
    created = {}
    for role in UserRole:
        user = User(
            name=f"{role.value.title()} User",
            email=f"{role.value}@fleetflow.com",
            hashed_password=password_hash,
            role=role,
            is_active=True,
        )
        db_session.add(user)
        created[role] = user
    await db_session.commit()
    return created


@pytest.fixture
def auth_headers(users):
    """Bearer headers per role: auth_headers[UserRole.MANAGER]."""
    headers = {}
    for role, user in users.items():
        token = create_access_token(
            data={"sub": user.email, "user_id": user.id, "role": role.value}
        )
        headers[role] = {"Authorization": f"Bearer {token}"}
    return headers


@pytest.fixture
def manager_headers(auth_headers):
    return auth_headers[UserRole.MANAGER]


@pytest.fixture
def make_vehicle(client, manager_headers):
    """Register a vehicle through the API and return its JSON."""
    counter = {"n": 0}

    async def _make(**overrides):
        counter["n"] += 1
        payload = {
            "name": f"Truck {counter['n']}",
            "license_plate": f"FL-{counter['n']:04d}",
            "vehicle_type": "Truck",
            "max_capacity": 500,
            "odometer": 1000,
            "acquisition_cost": 50000,
        }
        payload.update(overrides)
        response = await client.post("/v1/vehicles", json=payload, headers=manager_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def make_driver(client, manager_headers):
    """Register a driver with a license valid for a year and return its JSON."""
    counter = {"n": 0}

    async def _make(**overrides):
        counter["n"] += 1
        payload = {
            "name": f"Driver {counter['n']}",
            "license_number": f"DL-{counter['n']:04d}",
            "license_expiry": (utcnow() + timedelta(days=365)).isoformat(),
            "category": "Truck",
        }
        payload.update(overrides)
        response = await client.post("/v1/drivers", json=payload, headers=manager_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def dispatch_trip(client, manager_headers):
    async def _dispatch(vehicle_id, driver_id, cargo_weight=400, **extra):
        payload = {"vehicle_id": vehicle_id, "driver_id": driver_id, "cargo_weight": cargo_weight}
        payload.update(extra)
        return await client.post("/v1/trips", json=payload, headers=manager_headers)

    return _dispatch


@pytest.fixture
def session_factory():
    """Factory for extra sessions on the test database."""
    return TestingSessionLocal
