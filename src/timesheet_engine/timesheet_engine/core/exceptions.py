class DomainError(Exception):
    """Base exception for structural failures that stop a calculation."""

    code = "DOMAIN_ERROR"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"


class NotFoundError(DomainError):
    """Raised when a required master-data record does not exist."""

    code = "NOT_FOUND"


class EmployeeNotFoundError(NotFoundError):
    code = "EMPLOYEE_NOT_FOUND"


class ScheduleNotFoundError(NotFoundError):
    """No day plan resolves for the employee and date."""

    code = "NO_DAY_PLAN"


class PreconditionFailedError(DomainError):
    """Raised when a calculation runs out of sequence (e.g. prior month missing)."""

    code = "PRECONDITION_FAILED"


class MonthClosedError(DomainError):
    """Raised when a closed month would be recalculated without reopening it."""

    code = "MONTH_CLOSED"


class InsufficientVacationError(ValidationError):
    code = "INSUFFICIENT_VACATION"
