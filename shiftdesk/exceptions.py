"""Custom exceptions and error handling for the shift scheduling system.

Every error raised by the services carries a machine-readable code, an HTTP
status and a user-facing message, so the API layer can render it without
knowing which service produced it.
"""
from typing import Optional, Dict, Any


class ShiftDeskError(Exception):
    """Base class for errors with user-friendly messages."""

    error_code = "INTERNAL"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize error.

        Args:
            message: User-friendly error message
            details: Optional additional error details
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary format for API responses.

        Returns:
            Dictionary with error information
        """
        return {
            "success": False,
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


class InvalidInputError(ShiftDeskError):
    """Error raised when a request field is missing or malformed."""

    error_code = "INVALID_INPUT"
    status_code = 400

    def __init__(self, message: str, field_name: Optional[str] = None):
        details = {"field_name": field_name} if field_name else None
        super().__init__(message, details)


class InvalidDurationError(ShiftDeskError):
    """Error raised when a shift's time window breaks the duration rules."""

    error_code = "INVALID_DURATION"
    status_code = 400

    def __init__(self, message: str, duration_hours: Optional[float] = None):
        """
        Initialize invalid duration error.

        Args:
            message: User-friendly error message
            duration_hours: Actual duration of the rejected shift, if known
        """
        details = None
        if duration_hours is not None:
            details = {"duration_hours": round(duration_hours, 1)}
        super().__init__(message, details)


class UnauthenticatedError(ShiftDeskError):
    """Error raised when no valid session accompanies a request."""

    error_code = "UNAUTHENTICATED"
    status_code = 401


class SessionExpiredError(UnauthenticatedError):
    """Error raised when a correctly signed session has expired."""

    error_code = "SESSION_EXPIRED"

    def __init__(self):
        super().__init__("Session expired, please log in again")


class InvalidSessionError(UnauthenticatedError):
    """Error raised when a session token fails verification."""

    def __init__(self):
        super().__init__("Invalid token")


class MalformedTokenError(ShiftDeskError):
    """Error raised when a verified token lacks required claims."""

    error_code = "MALFORMED_TOKEN"
    status_code = 401

    def __init__(self, missing_claims: Optional[list] = None):
        details = {"missing_claims": missing_claims} if missing_claims else None
        super().__init__("Malformed token", details)


class ForbiddenError(ShiftDeskError):
    """Error raised when an authenticated identity lacks permission."""

    error_code = "FORBIDDEN"
    status_code = 403


class ConflictError(ShiftDeskError):
    """Error raised when a write would violate a uniqueness or overlap rule."""

    error_code = "CONFLICT"
    status_code = 409


class NotFoundError(ShiftDeskError):
    """Error raised when a requested resource is not found."""

    error_code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        """
        Initialize resource not found error.

        Args:
            resource_type: Type of resource (e.g., "shift", "user")
            resource_id: ID of the resource
        """
        super().__init__(
            f"{resource_type.capitalize()} not found",
            details={
                "resource_type": resource_type,
                "resource_id": resource_id
            }
        )


class EndpointNotFoundError(ShiftDeskError):
    """Error raised when no route matches the request path."""

    error_code = "NOT_FOUND"
    status_code = 404

    def __init__(self, path: str):
        super().__init__("Endpoint not found", details={"path": path})


class InternalError(ShiftDeskError):
    """Error raised when storage fails; never carries storage detail."""


def format_error_for_api(error: ShiftDeskError) -> Dict[str, Any]:
    """
    Format error for API response.

    Args:
        error: Error to format

    Returns:
        Dictionary suitable for JSON API response
    """
    return error.to_dict()
