class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class RemoteServiceError(DomainError):
    """Raised when the remote attendance service cannot be reached or answers with an error."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class StaleResultError(DomainError):
    """Raised when a fetch finished after a newer selection superseded it."""
