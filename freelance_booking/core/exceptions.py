# freelance_booking/core/exceptions.py
"""
Domain-specific exceptions for the booking core.

Every domain error carries a human-readable message that is rendered
verbatim to callers in the ``{"success": false, "error": ...}`` envelope.
The ``code`` is kept for logs and metrics.
"""

from typing import Any, Dict, Optional


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    default_message = "Request could not be processed"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_envelope(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message}


class InvalidRequestException(DomainException):
    """Raised when input is malformed or required fields are missing."""

    default_message = "Invalid request"

    def __init__(self, message: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, code=kwargs.pop("code", "INVALID_REQUEST"), **kwargs)


class InvalidIntervalException(InvalidRequestException):
    """Raised when an interval does not satisfy end > start."""

    default_message = "end_time must be after start_time"

    def __init__(self, message: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, code="INVALID_INTERVAL", **kwargs)


class UnauthenticatedException(DomainException):
    """Raised when no valid bearer credential accompanies the request."""

    default_message = "Authentication required"

    def __init__(self, message: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, code="UNAUTHENTICATED", **kwargs)


class UnauthorizedException(DomainException):
    """Raised when the caller is not allowed to act on a resource."""

    default_message = "Unauthorized: You can only update your own bookings"

    def __init__(self, message: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, code="UNAUTHORIZED", **kwargs)


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    default_message = "Not found"

    def __init__(self, message: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, code="NOT_FOUND", **kwargs)


class ServiceUnavailableException(DomainException):
    """Raised when a referenced service is missing, inactive, or owned by someone else."""

    default_message = "Service not found or inactive"

    def __init__(self, message: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, code="SERVICE_UNAVAILABLE", **kwargs)


class SlotUnavailableException(DomainException):
    """Raised when the requested window overlaps an existing commitment."""

    default_message = "Freelancer is not available during the requested time"

    def __init__(self, message: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, code="SLOT_UNAVAILABLE", **kwargs)


class InvalidTransitionException(DomainException):
    """Raised when a status change is not allowed by the booking state machine."""

    default_message = "Invalid status transition"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        from_status: Optional[str] = None,
        to_status: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        if message is None and from_status and to_status:
            message = f"Cannot change status from {from_status} to {to_status}"
        details = kwargs.pop("details", None) or {}
        if from_status:
            details.setdefault("from_status", from_status)
        if to_status:
            details.setdefault("to_status", to_status)
        super().__init__(message, code=kwargs.pop("code", "INVALID_TRANSITION"), details=details)


class NotConfirmedException(InvalidTransitionException):
    """Raised when completion is attempted on a booking that is not confirmed."""

    default_message = "Booking must be confirmed before marking as completed"

    def __init__(self, message: Optional[str] = None, **kwargs: Any) -> None:
        message = message or self.default_message
        super().__init__(message, code="NOT_CONFIRMED", **kwargs)


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    Used when data access operations fail, such as connection issues,
    query failures, or constraint violations.
    """

