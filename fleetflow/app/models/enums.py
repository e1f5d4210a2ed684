"""
Enumerations for users and fleet entities.

Values are the wire strings the dashboard frontend renders.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        MANAGER: Full access, the only role allowed to delete records
        DISPATCHER: Registers vehicles/drivers, dispatches and closes trips
        SAFETY: Maintains driver records and duty status
        FINANCE: Logs expenses and reads financial reports
    """
    MANAGER = "manager"
    DISPATCHER = "dispatcher"
    SAFETY = "safety"
    FINANCE = "finance"


class VehicleType(str, enum.Enum):
    TRUCK = "Truck"
    VAN = "Van"
    BIKE = "Bike"


class VehicleStatus(str, enum.Enum):
    """Vehicle lifecycle status. RETIRED is terminal."""
    AVAILABLE = "Available"
    ON_TRIP = "OnTrip"
    IN_SHOP = "InShop"
    RETIRED = "Retired"


class DriverCategory(str, enum.Enum):
    """Vehicle types a driver is licensed for."""
    TRUCK = "Truck"
    VAN = "Van"


class DriverStatus(str, enum.Enum):
    """Driver duty status. ON_TRIP is owned by the trip lifecycle."""
    ON_DUTY = "OnDuty"
    OFF_DUTY = "OffDuty"
    SUSPENDED = "Suspended"
    ON_TRIP = "OnTrip"


class TripStatus(str, enum.Enum):
    """Trip status enumeration."""
    DRAFT = "Draft"  # Model default only, dispatch creates trips as DISPATCHED
    DISPATCHED = "Dispatched"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class ExpenseType(str, enum.Enum):
    FUEL = "Fuel"
    MAINTENANCE = "Maintenance"


class MaintenanceType(str, enum.Enum):
    PREVENTIVE = "Preventive"
    REACTIVE = "Reactive"
    INSPECTION = "Inspection"


class MaintenanceStatus(str, enum.Enum):
    SCHEDULED = "Scheduled"  # Not produced by the service-log flow
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
