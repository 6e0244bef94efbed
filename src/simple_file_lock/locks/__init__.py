"""Locking subsystem for cross-process coordination over a shared filesystem.

Ownership is decided by the content of a single lock file. The protocol
lives in `file_lock`, the content model in `records`, and the storage and
path resolution collaborators in `storage`.
"""

from simple_file_lock.locks.file_lock import (
    AcquireResult,
    AcquireStatus,
    ReleaseResult,
    ReleaseStatus,
    SimpleFileLock,
)
from simple_file_lock.locks.records import (
    Clock,
    LockAbsent,
    LockOwned,
    LockProbe,
    LockRecord,
    LockUnreadable,
    ProcessIdentity,
    SystemClock,
    parse_lock_content,
)
from simple_file_lock.locks.storage import FileSystemLockStorage, LockPathResolver, LockStorage

__all__ = [
    "AcquireResult",
    "AcquireStatus",
    "Clock",
    "FileSystemLockStorage",
    "LockAbsent",
    "LockOwned",
    "LockPathResolver",
    "LockProbe",
    "LockRecord",
    "LockStorage",
    "LockUnreadable",
    "ProcessIdentity",
    "ReleaseResult",
    "ReleaseStatus",
    "SimpleFileLock",
    "SystemClock",
    "parse_lock_content",
]
