"""
Security module - error taxonomy and role checks
"""
from .error_handler import (
    MaintenanceError,
    ValidationError,
    InvalidTransitionError,
    NotFoundError,
    AuthorizationError,
    from_pydantic,
    maintenance_exception_handler,
)
from .permissions import authorize, PERMISSIONS

__all__ = [
    "MaintenanceError",
    "ValidationError",
    "InvalidTransitionError",
    "NotFoundError",
    "AuthorizationError",
    "from_pydantic",
    "maintenance_exception_handler",
    "authorize",
    "PERMISSIONS",
]
