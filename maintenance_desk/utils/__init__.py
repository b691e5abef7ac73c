"""
Utility functions
"""
from .secure_logging import (
    SensitiveDataFilter,
    SecureFormatter,
    JSONSecureFormatter,
    SENSITIVE_PATTERNS,
    mask_sensitive,
    configure_secure_logging,
)
from .ticket_lifecycle import (
    COMPLETED_STATUSES,
    ASSIGNED_STATUSES,
    OPEN_STATUSES,
    TRANSITIONS,
    STATUS_ORDER,
    can_transition,
    is_terminal,
)

__all__ = [
    # Secure Logging
    "SensitiveDataFilter",
    "SecureFormatter",
    "JSONSecureFormatter",
    "SENSITIVE_PATTERNS",
    "mask_sensitive",
    "configure_secure_logging",
    # Lifecycle
    "COMPLETED_STATUSES",
    "ASSIGNED_STATUSES",
    "OPEN_STATUSES",
    "TRANSITIONS",
    "STATUS_ORDER",
    "can_transition",
    "is_terminal",
]
