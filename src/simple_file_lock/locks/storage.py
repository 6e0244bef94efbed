"""Lock storage and lock path resolution.

The lock protocol only needs four byte-level operations from storage. The
filesystem implementation writes through a temporary sibling file and
``os.replace`` so a reader never observes a partially written record.
"""

from __future__ import annotations

import contextlib
import hashlib
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

from simple_file_lock.core.constants import DEFAULT_LOCK_DIR, LOCK_FILE_SUFFIX, LOCK_NAME_DIGEST_LENGTH

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class LockStorage(Protocol):
    """Byte-level storage consumed by the lock protocol."""

    def exists(self, path: Path) -> bool:
        """Return True if a lock file exists at path."""

    def read(self, path: Path) -> bytes:
        """Return raw lock content. Raises FileNotFoundError if missing."""

    def write(self, path: Path, content: bytes) -> bool:
        """Atomically replace the lock content. Returns True on success."""

    def delete(self, path: Path) -> None:
        """Remove the lock file. No error if it is already gone."""


def _write_all(fd: int, payload: bytes) -> None:
    """Write complete payload to fd, handling short writes."""
    total_written = 0
    while total_written < len(payload):
        written = os.write(fd, payload[total_written:])
        if written <= 0:
            raise OSError("short write while persisting lock record")
        total_written += written


class FileSystemLockStorage:
    """Lock storage on a local or network-mounted filesystem."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger(__name__)

    def exists(self, path: Path) -> bool:
        return path.exists()

    def read(self, path: Path) -> bytes:
        return path.read_bytes()

    def write(self, path: Path, content: bytes) -> bool:
        tmp_path: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
            try:
                _write_all(fd, content)
                os.fsync(fd)
            finally:
                os.close(fd)
            os.replace(tmp_path, path)
            tmp_path = None
            return True
        except OSError as e:
            self.logger.warning("Failed to write lock file %s: %s", path, e)
            return False
        finally:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_path)

    def delete(self, path: Path) -> None:
        path.unlink(missing_ok=True)


class LockPathResolver:
    """Map logical lock names to lock file paths inside one directory.

    Names made only of ``[A-Za-z0-9_.-]`` map to ``<name>.lock``. Other names
    have unsafe characters replaced with ``_`` and a short digest of the
    original name appended, so two different names never share a file.
    """

    def __init__(self, lock_dir: Path | str | None = None):
        self.lock_dir = Path(lock_dir).expanduser() if lock_dir is not None else DEFAULT_LOCK_DIR

    def resolve(self, lock_name: str) -> Path:
        safe_name = _UNSAFE_NAME_CHARS.sub("_", lock_name)
        if safe_name != lock_name:
            digest = hashlib.sha1(lock_name.encode("utf-8")).hexdigest()[:LOCK_NAME_DIGEST_LENGTH]
            safe_name = f"{safe_name}-{digest}"
        return self.lock_dir / f"{safe_name}{LOCK_FILE_SUFFIX}"
