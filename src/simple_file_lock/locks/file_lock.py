"""Lock protocol built on shared-filesystem visibility.

A `SimpleFileLock` decides, from the current content of its lock file, whether
the caller may acquire, re-acquire (it already owns the lock), must be denied,
or may reclaim a lock whose last write is older than the timeout. Every call
re-reads the file; the lock object keeps no ownership state of its own.

Limitations:
- Mutual exclusion is advisory and best-effort. Probe-then-write is not
  atomic, so two contexts that both find the file absent can both write it.
  The last replace wins. Use it for cooperative, low-contention coordination.
- Staleness is judged by wall-clock age of the last write only. Clock skew
  between hosts shifts the effective timeout.
- Calls never block or retry. Callers wanting to wait must loop themselves.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import assert_never

from simple_file_lock.core.config import LockConfig
from simple_file_lock.core.exceptions import InvalidArgumentError, StorageUnavailableError
from simple_file_lock.core.logging import with_log_context
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


class AcquireStatus(Enum):
    ACQUIRED = "acquired"
    REACQUIRED = "reacquired"
    RECLAIMED = "reclaimed"
    CONTENDED = "contended"
    UNREADABLE = "unreadable"
    STORAGE_ERROR = "storage_error"


_ACQUIRED_STATUSES = frozenset({AcquireStatus.ACQUIRED, AcquireStatus.REACQUIRED, AcquireStatus.RECLAIMED})


@dataclass(frozen=True)
class AcquireResult:
    """Outcome of one acquisition attempt.

    `record` is the record now on disk after a successful acquisition, or the
    blocking record for `CONTENDED`. `previous` is the record that was
    overwritten on reclaim or refresh.
    """

    status: AcquireStatus
    record: LockRecord | None = None
    previous: LockRecord | None = None
    error: StorageUnavailableError | None = None

    @property
    def acquired(self) -> bool:
        return self.status in _ACQUIRED_STATUSES


class ReleaseStatus(Enum):
    RELEASED = "released"
    NOT_LOCKED = "not_locked"
    NOT_OWNER = "not_owner"
    STORAGE_ERROR = "storage_error"


@dataclass(frozen=True)
class ReleaseResult:
    """Outcome of one release attempt."""

    status: ReleaseStatus
    holder: LockRecord | None = None
    error: StorageUnavailableError | None = None

    @property
    def released(self) -> bool:
        return self.status in (ReleaseStatus.RELEASED, ReleaseStatus.NOT_LOCKED)


def _to_timedelta(lock_timeout: timedelta | float) -> timedelta:
    if isinstance(lock_timeout, timedelta):
        return lock_timeout
    if isinstance(lock_timeout, bool) or not isinstance(lock_timeout, (int, float)):
        raise InvalidArgumentError(
            "Lock timeout must be a timedelta or a number of seconds",
            argument="lock_timeout",
            details=f"got {type(lock_timeout).__name__}",
        )
    if not math.isfinite(lock_timeout):
        raise InvalidArgumentError(
            "Lock timeout must be finite", argument="lock_timeout", details=f"got {lock_timeout}"
        )
    try:
        return timedelta(seconds=lock_timeout)
    except OverflowError as e:
        raise InvalidArgumentError(
            "Lock timeout is out of range", argument="lock_timeout", details=f"got {lock_timeout}"
        ) from e


class SimpleFileLock:
    """Non-blocking cross-process lock backed by a single lock file."""

    def __init__(
        self,
        lock_name: str,
        lock_path: Path,
        lock_timeout: timedelta,
        *,
        storage: LockStorage | None = None,
        identity: ProcessIdentity | None = None,
        clock: Clock | None = None,
        logger: logging.Logger | None = None,
    ):
        self._lock_name = lock_name
        self._lock_path = lock_path
        self._lock_timeout = lock_timeout
        self.storage = storage or FileSystemLockStorage()
        self.identity = identity or ProcessIdentity.current()
        self.clock = clock or SystemClock()
        self.logger = with_log_context(
            logger or logging.getLogger(__name__),
            lock_name=lock_name,
            lock_path=str(lock_path),
        )

    @classmethod
    def create(
        cls,
        lock_name: str,
        lock_timeout: timedelta | float,
        *,
        lock_dir: Path | str | None = None,
        resolver: LockPathResolver | None = None,
        storage: LockStorage | None = None,
        identity: ProcessIdentity | None = None,
        clock: Clock | None = None,
        logger: logging.Logger | None = None,
    ) -> SimpleFileLock:
        """Create a lock for a logical name.

        Args:
            lock_name: Non-empty logical lock name
            lock_timeout: Age (timedelta or seconds) after which a foreign lock may be reclaimed
            lock_dir: Directory for lock files when no resolver is given
            resolver: Maps the lock name to a path; defaults to `LockPathResolver(lock_dir)`
            storage: Storage collaborator; defaults to the filesystem
            identity: Identity of the calling context; defaults to the current process
            clock: Source of the current instant; defaults to the system clock
            logger: Logger for lock decisions

        Raises:
            InvalidArgumentError: If the name is empty or the timeout is negative or not finite
        """
        if not lock_name:
            raise InvalidArgumentError("Lock name cannot be null or empty", argument="lock_name")
        timeout = _to_timedelta(lock_timeout)
        if timeout < timedelta(0):
            raise InvalidArgumentError(
                "Lock timeout must not be negative",
                argument="lock_timeout",
                details=f"got {timeout.total_seconds()}s",
            )

        path_resolver = resolver or LockPathResolver(lock_dir)
        return cls(
            lock_name,
            path_resolver.resolve(lock_name),
            timeout,
            storage=storage,
            identity=identity,
            clock=clock,
            logger=logger,
        )

    @classmethod
    def from_config(cls, lock_name: str, config: LockConfig, **kwargs) -> SimpleFileLock:
        """Create a lock using the directory and timeout of a `LockConfig`."""
        return cls.create(lock_name, config.timeout, lock_dir=config.lock_dir, **kwargs)

    @property
    def lock_name(self) -> str:
        return self._lock_name

    @property
    def lock_path(self) -> Path:
        return self._lock_path

    @property
    def lock_timeout(self) -> timedelta:
        return self._lock_timeout

    def try_acquire_lock(self) -> bool:
        """Attempt to acquire the lock once, without waiting."""
        return self.try_acquire().acquired

    def release_lock(self) -> bool:
        """Release the lock if the calling context owns it.

        Returns True when the lock file was deleted or did not exist, False
        when another context holds it or storage failed.
        """
        return self.release().released

    def try_acquire(self) -> AcquireResult:
        """Attempt to acquire the lock once and report why it did or did not succeed."""
        try:
            probe = self._probe()
        except OSError as e:
            return AcquireResult(AcquireStatus.STORAGE_ERROR, error=self._storage_error("read", e))

        match probe:
            case LockAbsent():
                return self._write_record(AcquireStatus.ACQUIRED)
            case LockUnreadable(reason=reason):
                self.logger.debug("Lock file content is unreadable (%s); treating as foreign", reason)
                return AcquireResult(AcquireStatus.UNREADABLE)
            case LockOwned(record=record) if record.is_owned_by(self.identity):
                return self._write_record(AcquireStatus.REACQUIRED, previous=record)
            case LockOwned(record=record) if self._is_stale(record):
                self.logger.info(
                    "Reclaiming stale lock held by PID %s on %s (age %.1fs > timeout %.1fs)",
                    record.pid,
                    record.host,
                    record.age_seconds(self.clock.now()),
                    self._lock_timeout.total_seconds(),
                )
                return self._write_record(AcquireStatus.RECLAIMED, previous=record)
            case LockOwned(record=record):
                self.logger.debug("Lock is held by PID %s on %s", record.pid, record.host)
                return AcquireResult(AcquireStatus.CONTENDED, record=record)
            case _:
                assert_never(probe)

    def release(self) -> ReleaseResult:
        """Release the lock if owned, reporting what happened."""
        try:
            exists = self.storage.exists(self._lock_path)
        except OSError as e:
            return ReleaseResult(ReleaseStatus.STORAGE_ERROR, error=self._storage_error("exists", e))
        if not exists:
            return ReleaseResult(ReleaseStatus.NOT_LOCKED)

        # Ownership is confirmed by re-acquiring, which also reclaims a stale lock.
        result = self.try_acquire()
        if result.status is AcquireStatus.STORAGE_ERROR:
            return ReleaseResult(ReleaseStatus.STORAGE_ERROR, error=result.error)
        if not result.acquired:
            return ReleaseResult(ReleaseStatus.NOT_OWNER, holder=result.record)

        try:
            self.storage.delete(self._lock_path)
        except OSError as e:
            return ReleaseResult(ReleaseStatus.STORAGE_ERROR, error=self._storage_error("delete", e))
        self.logger.debug("Lock released")
        return ReleaseResult(ReleaseStatus.RELEASED)

    def read_record(self) -> LockRecord | None:
        """Read the current lock holder for diagnostics."""
        try:
            probe = self._probe()
        except OSError:
            return None
        if isinstance(probe, LockOwned):
            return probe.record
        return None

    @contextmanager
    def hold(self) -> Iterator[bool]:
        """Attempt acquisition and release on exit if it succeeded.

        Usage:
            with lock.hold() as acquired:
                if not acquired:
                    return
                # ... guarded work ...
        """
        acquired = self.try_acquire_lock()
        try:
            yield acquired
        finally:
            if acquired:
                self.release_lock()

    def _probe(self) -> LockProbe:
        if not self.storage.exists(self._lock_path):
            return LockAbsent()
        try:
            raw = self.storage.read(self._lock_path)
        except FileNotFoundError:
            # Deleted between the existence check and the read.
            return LockAbsent()
        return parse_lock_content(raw)

    def _is_stale(self, record: LockRecord) -> bool:
        return record.age_seconds(self.clock.now()) > self._lock_timeout.total_seconds()

    def _write_record(self, status: AcquireStatus, previous: LockRecord | None = None) -> AcquireResult:
        record = LockRecord.for_context(self.identity, self.clock)
        try:
            written = self.storage.write(self._lock_path, record.encode())
        except OSError as e:
            return AcquireResult(AcquireStatus.STORAGE_ERROR, previous=previous, error=self._storage_error("write", e))
        if not written:
            error = StorageUnavailableError(
                "Lock record write failed", lock_path=str(self._lock_path), operation="write"
            )
            return AcquireResult(AcquireStatus.STORAGE_ERROR, previous=previous, error=error)
        self.logger.debug("Lock %s", status.value)
        return AcquireResult(status, record=record, previous=previous)

    def _storage_error(self, operation: str, error: OSError) -> StorageUnavailableError:
        self.logger.warning("Lock storage %s failed for %s: %s", operation, self._lock_path, error)
        return StorageUnavailableError(
            "Lock storage unavailable",
            lock_path=str(self._lock_path),
            operation=operation,
            details=str(error),
            original_error=error,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(lock_name={self._lock_name!r}, lock_path={str(self._lock_path)!r}, "
            f"lock_timeout={self._lock_timeout.total_seconds()}s)"
        )
