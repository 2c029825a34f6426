class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class IllegalTransitionError(DomainError):
    """Raised when a workflow action is not allowed from the current state."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class DataGapWarning(UserWarning):
    """Emitted when an aggregation skips a record with missing fields."""
