"""Lock content model.

A lock file holds one JSON-encoded `LockRecord`. Probing the file yields one
of three variants: `LockAbsent`, `LockUnreadable` or `LockOwned`. Parsing is
best-effort and never raises; anything that does not decode to a complete
record is `LockUnreadable` and is treated as foreign ownership.
"""

from __future__ import annotations

import json
import os
import socket
import sys
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol

from simple_file_lock.core.constants import LOCK_RECORD_VERSION


class Clock(Protocol):
    """Source of the current instant."""

    def now(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


def _current_process_name() -> str:
    if sys.argv and sys.argv[0]:
        return Path(sys.argv[0]).name
    return Path(sys.executable).name


@dataclass(frozen=True)
class ProcessIdentity:
    """Identity of an execution context competing for a lock."""

    pid: int
    host: str
    process_name: str = ""

    @classmethod
    def current(cls) -> ProcessIdentity:
        return cls(pid=os.getpid(), host=socket.gethostname(), process_name=_current_process_name())


def _parse_timestamp(value: str) -> datetime:
    timestamp = datetime.fromisoformat(value)
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    return timestamp


@dataclass(frozen=True)
class LockRecord:
    """Ownership metadata persisted in a lock file."""

    pid: int
    host: str
    process_name: str
    timestamp: datetime
    version: int = LOCK_RECORD_VERSION

    @classmethod
    def for_context(cls, identity: ProcessIdentity, clock: Clock) -> LockRecord:
        """Freeze the given identity and the clock's current instant into a record."""
        return cls(
            pid=identity.pid,
            host=identity.host,
            process_name=identity.process_name,
            timestamp=clock.now(),
        )

    def is_owned_by(self, identity: ProcessIdentity) -> bool:
        """Same PID on the same host (host names compare case-insensitively)."""
        return self.pid == identity.pid and self.host.casefold() == identity.host.casefold()

    def age_seconds(self, now: datetime) -> float:
        return abs((now - self.timestamp).total_seconds())

    def to_dict(self) -> dict[str, Any]:
        return {
            "pid": self.pid,
            "host": self.host,
            "process_name": self.process_name,
            "timestamp": self.timestamp.isoformat(),
            "version": self.version,
        }

    def encode(self) -> bytes:
        return (json.dumps(self.to_dict(), sort_keys=True) + "\n").encode("utf-8")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LockRecord | None:
        try:
            pid = data["pid"]
            host = data["host"]
            if isinstance(pid, bool) or not isinstance(pid, int):
                return None
            if not isinstance(host, str) or not host:
                return None
            return cls(
                pid=pid,
                host=host,
                process_name=str(data.get("process_name", "")),
                timestamp=_parse_timestamp(str(data["timestamp"])),
                version=int(data.get("version", LOCK_RECORD_VERSION)),
            )
        except (KeyError, TypeError, ValueError, OverflowError):
            return None


@dataclass(frozen=True)
class LockAbsent:
    """No lock file exists."""


@dataclass(frozen=True)
class LockUnreadable:
    """A lock file exists but its content is not a valid record."""

    reason: str = ""


@dataclass(frozen=True)
class LockOwned:
    """A lock file exists and holds a valid record."""

    record: LockRecord


LockProbe = LockAbsent | LockUnreadable | LockOwned


def parse_lock_content(raw: bytes | str) -> LockUnreadable | LockOwned:
    """Classify raw lock file content. Never raises."""
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        return LockUnreadable(reason=f"undecodable content: {e}")

    if not isinstance(data, dict):
        return LockUnreadable(reason="content is not a JSON object")

    record = LockRecord.from_dict(data)
    if record is None:
        return LockUnreadable(reason="missing or malformed record fields")
    return LockOwned(record=record)
