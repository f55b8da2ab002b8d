class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input text is malformed. The message is guidance for the sender."""


class ConflictError(DomainError):
    """Raised when the current state forbids the operation (duplicate check-in, ...)."""


class ConfigurationError(DomainError):
    """Raised when tenant setup is incomplete (e.g. no manager)."""

    def __init__(self, message: str, *, request=None):
        super().__init__(message)
        self.request = request


class UnknownSenderError(DomainError):
    """Raised when an inbound identifier does not map to an active employee."""


class StorageError(DomainError):
    """Transient storage/transport failure. The sender should simply retry."""


class AuthorizationError(DomainError):
    """Raised when a sender lacks permission for an action."""
