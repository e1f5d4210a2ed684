"""
Database session configuration.

This module handles database engine creation and session management
using SQLAlchemy with async support for PostgreSQL.
"""

import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm.exc import StaleDataError

from fleetflow.app.core.config import settings
from fleetflow.app.core.exceptions import ConflictError, UnexpectedStoreError, ValidationError

logger = logging.getLogger(__name__)

# SQLite (local runs) does not take queue pool sizing
_pool_options = {}
if not settings.database_url.startswith("sqlite"):
    _pool_options = {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
    }

# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=settings.db_echo,
    future=True,
    **_pool_options,
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Create declarative base for models
Base = declarative_base()


async def get_db():
    """
    FastAPI dependency for database sessions.

    Yields an async database session and ensures it's properly closed.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def unit_of_work(db: AsyncSession):
    """
    Apply every change staged inside the block as one commit.

    Domain operations validate first, then stage all record mutations on the
    session and leave this block; any failure rolls the whole unit back.

    Raises:
        ConflictError: a versioned row was changed by a concurrent operation
        ValidationError: a unique constraint was hit (e.g. plate registered concurrently)
        UnexpectedStoreError: any other persistence failure
    """
    try:
        yield db
        await db.commit()
    except StaleDataError as exc:
        await db.rollback()
        logger.warning("Concurrent modification detected: %s", exc)
        raise ConflictError(
            "The record was modified by another operation, reload and try again"
        ) from exc
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("Integrity violation: %s", exc.orig)
        raise ValidationError("Operation violates a uniqueness or reference constraint") from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Store failure during unit of work")
        raise UnexpectedStoreError() from exc
    except Exception:
        await db.rollback()
        raise
