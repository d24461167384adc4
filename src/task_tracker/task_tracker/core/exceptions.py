class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist (or is not visible to the caller)."""


class InternalError(DomainError):
    """Raised when the store fails to persist a change."""


class AuthenticationError(DomainError):
    """Raised when credentials or bearer tokens are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
