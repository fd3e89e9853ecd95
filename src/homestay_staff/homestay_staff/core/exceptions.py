from __future__ import annotations

from typing import Any, Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations.

    Each subclass carries the HTTP status and a stable ``code`` the controller
    layer uses to build the error response.
    """

    status_code = 400
    code = "domain_error"
    default_message = "Request could not be processed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"
    default_message = "Validation failed"

    def __init__(self, message: Optional[str] = None, *, errors: Sequence[str] = ()):
        self.errors = list(errors)
        if message is None and self.errors:
            message = "; ".join(self.errors)
        super().__init__(message)


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403
    code = "forbidden"
    default_message = "Access denied"


class NotFoundError(DomainError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class ConflictError(DomainError):
    """Raised when a shift overlaps an active shift of the same staff member."""

    status_code = 409
    code = "shift_conflict"
    default_message = "Shift conflicts with existing schedule"

    def __init__(self, message: Optional[str] = None, *, conflicts: Sequence[Any] = ()):
        self.conflicts = list(conflicts)
        super().__init__(message)


class StateError(DomainError):
    """Raised on forbidden shift lifecycle transitions."""

    code = "invalid_state"
    default_message = "Operation not allowed in the current state"


class StaffInactiveError(DomainError):
    code = "staff_inactive"
    default_message = "Staff member is not active"


class AlreadyCheckedInError(DomainError):
    status_code = 409
    code = "already_checked_in"
    default_message = "Staff member already checked in today"


class NoCheckInError(DomainError):
    code = "no_check_in"
    default_message = "No check-in record found for today"


class AlreadyCheckedOutError(DomainError):
    code = "already_checked_out"
    default_message = "Staff member already checked out today"
