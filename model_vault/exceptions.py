"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class ModelVaultError(Exception):
    """Base exception for all application-specific errors."""


class InvalidInputError(ModelVaultError):
    """Raised when a request is malformed before any I/O takes place."""


class NameCollisionError(ModelVaultError):
    """Raised when the destination filename is already taken in the artifact root."""


class DownloadFailedError(ModelVaultError):
    """
    Raised when a transfer fails due to a network error, a non-success HTTP status
    or a local write error. The underlying exception is kept in `cause`.
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class DeleteFailedError(ModelVaultError):
    """Raised when an artifact file exists but cannot be removed."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class ScanFailedError(ModelVaultError):
    """Raised when the artifact root cannot be created or enumerated."""


class ConfigurationError(ModelVaultError):
    """Raised for issues related to configuration loading or validation."""
