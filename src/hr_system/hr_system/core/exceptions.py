from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations.

    `code` is a stable identifier returned to API clients; `http_status` is
    what the controller layer answers with.
    """

    code = "domain_error"
    http_status = 400

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message())
        self.message = str(self)

    @classmethod
    def default_message(cls) -> str:
        return cls.__doc__.strip().splitlines()[0] if cls.__doc__ else cls.__name__


class ValidationError(DomainError):
    """Input data is invalid or violates domain rules."""

    code = "validation_error"


class AuthenticationError(DomainError):
    """Invalid credentials."""

    code = "authentication_failed"
    http_status = 401


class AuthorizationError(DomainError):
    """Not allowed to perform this action."""

    code = "forbidden"
    http_status = 403


class NotFoundError(DomainError):
    """Resource not found."""

    code = "not_found"
    http_status = 404


class ConflictError(DomainError):
    """Operation conflicts with the current state."""

    code = "conflict"
    http_status = 409


# Attendance ledger


class AlreadyCheckedIn(ConflictError):
    """Already checked in today."""

    code = "already_checked_in"


class NoCheckInFound(NotFoundError):
    """No check-in found for today."""

    code = "no_check_in_found"


class AlreadyCheckedOut(ConflictError):
    """Already checked out today."""

    code = "already_checked_out"


class InvalidInterval(ValidationError):
    """End of interval is before its start."""

    code = "invalid_interval"


# Overtime and leave requests


class PastDateNotAllowed(ValidationError):
    """Cannot create a request for a date in the past."""

    code = "past_date_not_allowed"


class InvalidHours(ValidationError):
    """Requested hours must be positive."""

    code = "invalid_hours"


class RequestNotFound(NotFoundError):
    """Request not found."""

    code = "request_not_found"


class RequestAlreadyDecided(ConflictError):
    """Request has already been decided."""

    code = "request_already_decided"


class AlreadyApproved(RequestAlreadyDecided):
    """Request is already approved."""

    code = "already_approved"


# Payroll


class InvalidPeriod(ValidationError):
    """Period start must not be after its end."""

    code = "invalid_period"


# Directory


class ReferentialIntegrityViolation(ConflictError):
    """Operation would break a reference between records."""

    code = "referential_integrity_violation"


class EmployeeNotFound(NotFoundError):
    """Employee not found."""

    code = "employee_not_found"


class DepartmentNotFound(NotFoundError):
    """Department not found."""

    code = "department_not_found"
