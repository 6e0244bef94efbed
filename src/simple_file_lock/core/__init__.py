"""Core module - Foundation components with no internal dependencies.

This module provides the basic building blocks used throughout the package:
- Custom exceptions
- Configuration dataclass
- Constants and defaults
- Logging helpers
"""

from simple_file_lock.core.exceptions import (
    FileLockError,
    InvalidArgumentError,
    ConfigurationError,
    StorageUnavailableError,
)

from simple_file_lock.core.config import LockConfig

from simple_file_lock.core.constants import (
    DEFAULT_LOCK_DIR,
    DEFAULT_LOCK_TIMEOUT_SECONDS,
    LOCK_FILE_SUFFIX,
    LOCK_RECORD_VERSION,
    ENV_LOCK_DIR,
    ENV_LOCK_TIMEOUT,
)

from simple_file_lock.core.logging import (
    JSONFormatter,
    ContextLoggerAdapter,
    setup_logging,
    setup_logging_from_config,
    with_log_context,
)

__all__ = [
    # Exceptions
    "FileLockError",
    "InvalidArgumentError",
    "ConfigurationError",
    "StorageUnavailableError",
    # Config
    "LockConfig",
    # Constants
    "DEFAULT_LOCK_DIR",
    "DEFAULT_LOCK_TIMEOUT_SECONDS",
    "LOCK_FILE_SUFFIX",
    "LOCK_RECORD_VERSION",
    "ENV_LOCK_DIR",
    "ENV_LOCK_TIMEOUT",
    # Logging
    "JSONFormatter",
    "ContextLoggerAdapter",
    "setup_logging",
    "setup_logging_from_config",
    "with_log_context",
]
