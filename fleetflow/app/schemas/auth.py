"""
Authentication Pydantic schemas.

Defines request and response schemas for authentication endpoints.
"""

from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from fleetflow.app.models.enums import UserRole


class UserRegister(BaseModel):
    """
    Schema for user registration.

    Used by POST /auth/register endpoint.
    """
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=6, max_length=72, description="Password (6-72 characters)")
    role: UserRole = Field(default=UserRole.DISPATCHER, description="Operational role")


class UserLogin(BaseModel):
    """
    Schema for user login.

    Used by POST /auth/login endpoint.
    """
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., description="Password")


class TokenResponse(BaseModel):
    """
    Schema for JWT token response.

    Returned by successful login/register operations.
    """
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user_id: int = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")
    role: UserRole = Field(..., description="User role")


class UserResponse(BaseModel):
    """
    Schema for user information response.

    Used by GET /auth/me endpoint.
    """
    id: int
    name: str
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
