"""
Custom domain exceptions for the application.

These exceptions are raised by the service layer and converted to HTTP exceptions
by centralized exception handlers in main.py, maintaining proper separation of concerns.

The authentication module (auth.py) also uses these domain exceptions to remain
HTTP-agnostic, allowing reuse in non-HTTP contexts (CLI tools, scripts).

Every exception carries a correlation ID for Sentry integration and user error reporting.
"""

from core.correlation import generate_correlation_id, get_correlation_id


class DomainException(Exception):
    """
    Base class for all domain exceptions.

    Attributes:
        message: Human-readable error message.
        correlation_id: Unique ID for error tracking (auto-generated if not provided).
    """

    def __init__(self, message: str, correlation_id: str | None = None):
        self.message = message
        # Use request correlation ID if available, otherwise generate new one
        self.correlation_id = (
            correlation_id or get_correlation_id() or generate_correlation_id()
        )
        super().__init__(self.message)


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    pass


class PermissionDeniedException(DomainException):
    """Raised when user lacks required permissions."""

    pass


class ValidationException(DomainException):
    """Raised when input validation fails."""

    pass


class AuthenticationException(DomainException):
    """Raised when authentication fails."""

    pass


class InactiveUserException(PermissionDeniedException):
    """User account is inactive."""

    pass


class InsufficientPermissionsException(PermissionDeniedException):
    """User doesn't have sufficient permissions."""

    pass


# Statistics exceptions


class StatsValidationException(ValidationException):
    """Base exception for rejected statistics queries."""

    pass


class InvalidIntervalException(StatsValidationException):
    """Raised when a time-series query has a missing or unknown interval."""

    def __init__(self, interval: str | None) -> None:
        if interval:
            message = (
                f"Invalid interval '{interval}'. Expected one of: day, week, month, year"
            )
        else:
            message = "The interval parameter is required (day, week, month, year)"
        super().__init__(message)
        self.interval = interval


class EmptyExportDomainException(StatsValidationException):
    """Raised when a spreadsheet export would cover no time bucket at all."""

    def __init__(self) -> None:
        super().__init__(
            "The requested time range contains no buckets to export. "
            "Check start_at and end_at."
        )
