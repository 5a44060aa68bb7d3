class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConflictError(DomainError):
    """Raised by repositories when a concurrent write won the race.

    Examples: a second insert for the same (employee, day), or an update
    against a stale record version.
    """
