"""
Shared column helpers for FleetFlow models.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (SQLite round-trips) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def timestamp_columns():
    """created_at / updated_at pair, stamped in Python so they are readable right after flush."""
    return (
        Column(DateTime(timezone=True), default=utcnow, nullable=False),
        Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False),
    )
