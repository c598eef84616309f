class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when the request carries no authenticated user."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced teacher, lesson or salary record does not exist."""


class ConflictError(DomainError):
    """Raised when an operation would overwrite a record in a terminal state."""


class DuplicateRecordError(ConflictError):
    """Raised by repositories when a unique key already holds a row."""
