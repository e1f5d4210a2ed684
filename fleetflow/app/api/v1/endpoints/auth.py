"""
Authentication API endpoints.

Provides register, login, logout and user info endpoints for the dashboard.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from fleetflow.app.db.session import get_db, unit_of_work
from fleetflow.app.models.user import User
from fleetflow.app.models.enums import UserRole
from fleetflow.app.schemas.auth import UserRegister, UserLogin, TokenResponse, UserResponse
from fleetflow.app.schemas.common import MessageResponse
from fleetflow.app.core.security import get_password_hash, verify_password
from fleetflow.app.core.jwt import create_access_token
from fleetflow.app.core.dependencies import get_current_user
from fleetflow.app.core.token_revocation import revoke_token
from fleetflow.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _issue_token(user: User) -> TokenResponse:
    jwt_payload = {
        "sub": user.email,
        "user_id": user.id,
        "role": user.role.value,
    }

    access_token = create_access_token(data=jwt_payload)

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user_id=user.id,
        name=user.name,
        email=user.email,
        role=user.role
    )


def _client_ip(request: Request):
    return request.client.host if request.client else None


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new user.

    Rules:
    - MANAGER role cannot be created via API (managers are seeded).
    - Dispatcher, safety and finance accounts may self-register.
    """
    # 1. Block MANAGER registration
    if user_data.role == UserRole.MANAGER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Manager users cannot be registered via API"
        )

    # 2. Check if email already exists
    result = await db.execute(select(User).where(User.email == user_data.email))
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    async with unit_of_work(db):
        new_user = User(
            name=user_data.name,
            email=user_data.email,
            hashed_password=get_password_hash(user_data.password),
            role=user_data.role,
            is_active=True
        )
        db.add(new_user)
        await db.flush()

        await log_event(
            db=db,
            action=AuditAction.USER_CREATED,
            actor={"user_id": new_user.id, "sub": new_user.email},
            entity_type="user",
            entity_id=new_user.id,
            metadata={"role": new_user.role.value},
            ip_address=_client_ip(request)
        )

    return _issue_token(new_user)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Login user and return JWT token.

    Logs successful and failed login attempts for security monitoring.
    """
    result = await db.execute(select(User).where(User.email == credentials.email))
    user = result.scalar_one_or_none()

    failure_reason = None
    if not user:
        failure_reason = "User not found"
    elif not verify_password(credentials.password, user.hashed_password):
        failure_reason = "Invalid password"

    if failure_reason:
        async with unit_of_work(db):
            await log_event(
                db=db,
                action=AuditAction.LOGIN_FAILED,
                actor={"user_id": user.id if user else None, "sub": credentials.email},
                entity_type="user",
                metadata={"reason": failure_reason},
                ip_address=_client_ip(request)
            )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        async with unit_of_work(db):
            await log_event(
                db=db,
                action=AuditAction.LOGIN_FAILED,
                actor={"user_id": user.id, "sub": user.email},
                entity_type="user",
                entity_id=user.id,
                metadata={"reason": "Account is inactive"},
                ip_address=_client_ip(request)
            )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user account"
        )

    async with unit_of_work(db):
        await log_event(
            db=db,
            action=AuditAction.LOGIN_SUCCESS,
            actor={"user_id": user.id, "sub": user.email},
            entity_type="user",
            entity_id=user.id,
            ip_address=_client_ip(request)
        )

    return _issue_token(user)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get current authenticated user information.

    Raises:
        404: If user not found in database
    """
    user = await db.get(User, current_user["user_id"])

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return UserResponse.model_validate(user)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Revoke the presented token.

    The token stays unusable until it would have expired anyway.
    """
    revoked = await revoke_token(current_user["token"], current_user["user_id"])
    if not revoked:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Token revocation is temporarily unavailable"
        )

    async with unit_of_work(db):
        await log_event(
            db=db,
            action=AuditAction.TOKEN_REVOKED,
            actor=current_user,
            entity_type="user",
            entity_id=current_user["user_id"]
        )

    return MessageResponse(message="Logged out")
