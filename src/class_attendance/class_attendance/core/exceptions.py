class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing, malformed or violates domain rules."""


class DuplicateRecordError(ValidationError):
    """Raised when a row would break a uniqueness rule."""


class NotFoundError(DomainError):
    """Raised when a lookup that must match at least one row matched none."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""
