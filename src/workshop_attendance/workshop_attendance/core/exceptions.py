class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class DuplicateClockInError(DomainError):
    """Raised when the user already clocked in on that day."""


class NoOpenRecordError(DomainError):
    """Raised on clock-out when the user has no open attendance record."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class ForbiddenError(DomainError):
    """Raised when a user lacks permission for an action."""


AuthorizationError = ForbiddenError


class InternalUnavailableError(DomainError):
    """Raised when the persistence layer is unreachable or not configured."""
