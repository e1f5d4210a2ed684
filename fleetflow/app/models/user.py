"""
User database model.

This module defines the User SQLAlchemy model for authentication.
"""

from sqlalchemy import Column, Integer, String, Boolean, Enum
from fleetflow.app.db.session import Base
from fleetflow.app.models.base import timestamp_columns
from fleetflow.app.models.enums import UserRole


class User(Base):
    """
    User model for authentication and role-based access.

    Every user holds exactly one operational role.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    role = Column(Enum(UserRole), default=UserRole.DISPATCHER, nullable=False)

    created_at, updated_at = timestamp_columns()

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
