"""
simple-file-lock - advisory cross-process locks over a shared filesystem

Processes, possibly on different machines, coordinate on a named resource by
contending for one lock file. Locks are non-blocking, re-entrant for the
owning process and reclaimable once their last write is older than a timeout.
"""

from simple_file_lock.core.config import LockConfig
from simple_file_lock.core.exceptions import (
    ConfigurationError,
    FileLockError,
    InvalidArgumentError,
    StorageUnavailableError,
)
from simple_file_lock.core.logging import setup_logging, setup_logging_from_config
from simple_file_lock.locks import (
    AcquireResult,
    AcquireStatus,
    FileSystemLockStorage,
    LockPathResolver,
    LockRecord,
    ProcessIdentity,
    ReleaseResult,
    ReleaseStatus,
    SimpleFileLock,
)

__version__ = "1.0.0"

__all__ = [
    "AcquireResult",
    "AcquireStatus",
    "ConfigurationError",
    "FileLockError",
    "FileSystemLockStorage",
    "InvalidArgumentError",
    "LockConfig",
    "LockPathResolver",
    "LockRecord",
    "ProcessIdentity",
    "ReleaseResult",
    "ReleaseStatus",
    "SimpleFileLock",
    "StorageUnavailableError",
    "__version__",
    "setup_logging",
    "setup_logging_from_config",
]
