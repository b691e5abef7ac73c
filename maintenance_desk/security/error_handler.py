"""
Error taxonomy for the maintenance desk and its FastAPI exception handler

This module provides:
- MaintenanceError base class carrying a code, a safe message and a trace ID
- ValidationError, InvalidTransitionError, NotFoundError, AuthorizationError
- Conversion of pydantic validation failures into ValidationError
- Global FastAPI exception handler that never exposes internal details

Usage:
    from maintenance_desk.security.error_handler import NotFoundError

    raise NotFoundError("Ticket", ticket_id)

    # In main.py
    app.add_exception_handler(Exception, maintenance_exception_handler)
"""

import uuid
import logging
from typing import Optional, Dict, Any
from datetime import datetime, timezone

from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


# Error codes mapped to user-friendly messages
ERROR_CODES: Dict[str, str] = {
    "E001": "An internal server error occurred. Please try again later.",
    "E005": "Authentication required. Please identify yourself.",
    "E006": "You don't have permission to perform this action.",
    "E007": "The requested resource was not found.",
    "E009": "Validation error. Please check the provided data.",
    "E010": "The ticket cannot move to the requested status.",
}

DEFAULT_STATUS_CODES: Dict[str, int] = {
    "E001": 500,
    "E005": 401,
    "E006": 403,
    "E007": 404,
    "E009": 422,
    "E010": 409,
}


def generate_trace_id() -> str:
    """Generate a unique trace ID for log correlation."""
    return str(uuid.uuid4())


class MaintenanceError(Exception):
    """
    Base class for every error raised by the ticket engine.

    Attributes:
        code: Error code (see ERROR_CODES)
        message: User-friendly message
        status_code: HTTP status code used by the API adapter
        trace_id: Unique ID for log correlation
        context: Additional details for logging and for the caller
    """

    code = "E001"

    def __init__(
        self,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message or ERROR_CODES.get(self.code, ERROR_CODES["E001"])
        self.status_code = status_code or DEFAULT_STATUS_CODES.get(self.code, 500)
        self.trace_id = generate_trace_id()
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()

        super().__init__(self.message)

    def to_response(self) -> Dict[str, Any]:
        """Convert to a response dict safe for clients."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "trace_id": self.trace_id,
                "timestamp": self.timestamp,
            }
        }

    def log_error(self, logger_instance: Optional[logging.Logger] = None) -> None:
        log = logger_instance or logger
        log.warning(
            f"{type(self).__name__} [{self.code}]: {self.message}",
            extra={
                "error_code": self.code,
                "trace_id": self.trace_id,
                "status_code": self.status_code,
                "context": self.context,
            }
        )


class ValidationError(MaintenanceError):
    """Malformed input: empty text, unknown enum value, rating out of range"""
    code = "E009"


class InvalidTransitionError(ValidationError):
    """Status change rejected by the strict lifecycle"""
    code = "E010"

    def __init__(self, current: str, requested: str):
        super().__init__(
            message=f"Cannot move ticket from '{current}' to '{requested}'.",
            context={"current": current, "requested": requested},
        )


class NotFoundError(MaintenanceError):
    """Operation references an id that is not in the collection"""
    code = "E007"

    def __init__(self, resource: str, resource_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(
            message=f"{resource} {resource_id} not found.",
            context={"resource": resource, "id": resource_id},
        )


class AuthorizationError(MaintenanceError):
    """Action attempted by a role that is not permitted to perform it"""
    code = "E006"

    def __init__(self, action: str, role: str, reason: Optional[str] = None):
        message = f"Role '{role}' may not {action}."
        if reason:
            message = f"{message[:-1]}: {reason}."
        super().__init__(message=message, context={"action": action, "role": role})


def from_pydantic(exc: PydanticValidationError) -> ValidationError:
    """Convert a pydantic failure into a ValidationError naming the first bad field."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())) or "input"
    detail = first.get("msg", "invalid value")
    return ValidationError(
        message=f"Validation error on '{field}': {detail}",
        context={"field": field, "errors": len(errors)},
    )


async def maintenance_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for FastAPI.

    Register with: app.add_exception_handler(Exception, maintenance_exception_handler)
    """
    if isinstance(exc, MaintenanceError):
        exc.log_error()
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    trace_id = generate_trace_id()
    timestamp = datetime.now(timezone.utc).isoformat()

    if isinstance(exc, (HTTPException, StarletteHTTPException)):
        code = _http_status_to_error_code(exc.status_code)
        logger.warning(
            f"HTTPException [{code}] trace_id={trace_id}: {exc.detail}",
            extra={"trace_id": trace_id, "path": str(request.url), "method": request.method},
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": code,
                    "message": str(exc.detail),
                    "trace_id": trace_id,
                    "timestamp": timestamp,
                }
            },
            headers=getattr(exc, "headers", None),
        )

    # Unexpected exceptions never expose details
    logger.error(
        f"Unhandled exception trace_id={trace_id}",
        extra={
            "trace_id": trace_id,
            "exception_type": type(exc).__name__,
            "path": str(request.url),
            "method": request.method,
        },
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "E001",
                "message": ERROR_CODES["E001"],
                "trace_id": trace_id,
                "timestamp": timestamp,
            }
        }
    )


def _http_status_to_error_code(status_code: int) -> str:
    mapping = {
        401: "E005",
        403: "E006",
        404: "E007",
        409: "E010",
        422: "E009",
    }
    return mapping.get(status_code, "E001")


__all__ = [
    "MaintenanceError",
    "ValidationError",
    "InvalidTransitionError",
    "NotFoundError",
    "AuthorizationError",
    "ERROR_CODES",
    "DEFAULT_STATUS_CODES",
    "generate_trace_id",
    "from_pydantic",
    "maintenance_exception_handler",
]
