"""
Role-based access control.

Each operation is gated by an explicit policy entry: the caller's role must
belong to the role set listed for that operation. The check itself is a pure
function; `require_role` wraps it as a FastAPI dependency.
"""

from typing import Dict, FrozenSet
from fastapi import Depends
from fleetflow.app.core.dependencies import get_current_user
from fleetflow.app.core.exceptions import InsufficientPermissionsError
from fleetflow.app.models.enums import UserRole

ANY_ROLE = frozenset(UserRole)
MANAGER_ONLY = frozenset({UserRole.MANAGER})
FLEET_EDITORS = frozenset({UserRole.MANAGER, UserRole.DISPATCHER})
DRIVER_EDITORS = frozenset({UserRole.MANAGER, UserRole.DISPATCHER, UserRole.SAFETY})
EXPENSE_LOGGERS = frozenset({UserRole.MANAGER, UserRole.FINANCE, UserRole.DISPATCHER})
REPORT_READERS = frozenset({UserRole.MANAGER, UserRole.FINANCE})


OPERATION_ROLES: Dict[str, FrozenSet[UserRole]] = {
    # Vehicles
    "vehicle:read": ANY_ROLE,
    "vehicle:create": FLEET_EDITORS,
    "vehicle:update": FLEET_EDITORS,
    "vehicle:delete": MANAGER_ONLY,
    # Drivers
    "driver:read": ANY_ROLE,
    "driver:create": DRIVER_EDITORS,
    "driver:update": DRIVER_EDITORS,
    "driver:toggle_status": DRIVER_EDITORS,
    "driver:delete": MANAGER_ONLY,
    # Trips
    "trip:read": ANY_ROLE,
    "trip:dispatch": FLEET_EDITORS,
    "trip:complete": FLEET_EDITORS,
    "trip:cancel": FLEET_EDITORS,
    # Expenses
    "expense:read": ANY_ROLE,
    "expense:create": EXPENSE_LOGGERS,
    # Maintenance
    "maintenance:read": ANY_ROLE,
    "maintenance:create": FLEET_EDITORS,
    "maintenance:complete": FLEET_EDITORS,
    "maintenance:delete": FLEET_EDITORS,
    # Reporting
    "analytics:read": REPORT_READERS,
    "analytics:export": REPORT_READERS,
    # Audit trail
    "audit:read": MANAGER_ONLY,
}


def ensure_role(role: str, operation: str) -> UserRole:
    """
    Check that `role` may perform `operation`.

    Args:
        role: Role string carried by the caller's token
        operation: Key into OPERATION_ROLES

    Returns:
        The caller's role as a UserRole

    Raises:
        InsufficientPermissionsError: unknown role, or role not in the operation's set
        KeyError: operation is not registered (programming error)
    """
    allowed = OPERATION_ROLES[operation]

    try:
        user_role = UserRole(role)
    except ValueError:
        raise InsufficientPermissionsError("Invalid role in token", details={"operation": operation})

    if user_role not in allowed:
        raise InsufficientPermissionsError(
            f"Access denied. Required role: {', '.join(sorted(r.value for r in allowed))}",
            details={"operation": operation, "role": user_role.value}
        )

    return user_role


def require_role(operation: str):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.post("/trips")
        async def dispatch_trip(current_user: dict = Depends(require_role("trip:dispatch"))):
            ...

    Returns:
        FastAPI dependency that returns the authenticated user payload
    """
    # Fail at import time on a typo rather than on the first request
    if operation not in OPERATION_ROLES:
        raise KeyError(f"Unknown operation '{operation}'")

    async def role_checker(current_user: dict = Depends(get_current_user)) -> dict:
        ensure_role(current_user.get("role"), operation)
        return current_user

    return role_checker
