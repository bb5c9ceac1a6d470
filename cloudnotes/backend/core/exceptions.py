"""
Custom Exceptions.

Application-specific exception classes. Services raise these; the handlers
in core/exception_handlers.py are the only place they become HTTP responses.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when an id does not resolve in the expected collection."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when input is malformed or a required field is missing."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class AuthenticationError(ApplicationError):
    """Raised when the bearer credential is missing or invalid."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, code="AUTH_UNAUTHORIZED")


class StorageError(ApplicationError):
    """Raised when the note store or the blob store fails."""

    def __init__(self, message: str = "Storage operation failed") -> None:
        super().__init__(message, code="SYS_STORAGE_ERROR")
