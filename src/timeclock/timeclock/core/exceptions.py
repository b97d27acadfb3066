class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when credentials are invalid or a user-scoped call has no user."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class StoreError(DomainError):
    """Raised when a store create/update/delete fails.

    The original exception is kept as ``__cause__``.
    """


class EarlyClockOutConfirmationRequired(ValidationError):
    """Clock-out before the daily target needs an explicit confirmation."""

    def __init__(self, deficit_ms: int):
        super().__init__("Daily target not reached yet, confirm to clock out early")
        self.deficit_ms = int(deficit_ms)
