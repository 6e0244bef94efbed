"""Custom exceptions for simple-file-lock.

All exception classes carry a short message plus optional details so that
callers can log them without extra formatting.
"""


class FileLockError(Exception):
    """Base exception for all simple-file-lock errors."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class InvalidArgumentError(FileLockError, ValueError):
    """Raised when a lock is constructed with invalid arguments.

    Examples:
        - Empty or missing lock name
        - Negative staleness timeout
    """

    def __init__(self, message: str, argument: str | None = None, details: str | None = None):
        self.argument = argument
        super().__init__(message, details)


class ConfigurationError(FileLockError):
    """Exception raised for configuration-related errors.

    Examples:
        - Non-numeric timeout in the environment
        - Unknown log format
    """

    def __init__(self, message: str, field: str | None = None, details: str | None = None):
        self.field = field
        super().__init__(message, details)


class StorageUnavailableError(FileLockError):
    """Wraps an IO failure reported by the lock storage.

    Lock operations never raise this; it is attached to acquire/release
    results so callers that want the cause can inspect it.
    """

    def __init__(
        self,
        message: str,
        lock_path: str | None = None,
        operation: str | None = None,
        details: str | None = None,
        original_error: Exception | None = None,
    ):
        self.lock_path = lock_path
        self.operation = operation
        self.original_error = original_error
        super().__init__(message, details)

    def __str__(self) -> str:
        parts = [self.message]
        if self.operation:
            parts.append(f"during {self.operation}")
        if self.lock_path:
            parts.append(f"at '{self.lock_path}'")
        if self.details:
            parts.append(self.details)
        return " - ".join(parts)
