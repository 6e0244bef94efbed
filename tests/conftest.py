"""Pytest configuration and fixtures for simple-file-lock tests"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from simple_file_lock.locks.records import ProcessIdentity


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> ManualClock:
    """A manually advanced clock shared by every lock in a test"""
    return ManualClock()


@pytest.fixture
def lock_dir(tmp_path: Path) -> Path:
    """Directory holding lock files for one test"""
    return tmp_path / "locks"


@pytest.fixture
def identity_a() -> ProcessIdentity:
    """Simulated context A"""
    return ProcessIdentity(pid=4242, host="build-agent-01", process_name="worker-a")


@pytest.fixture
def identity_b() -> ProcessIdentity:
    """Simulated context B, on a different machine"""
    return ProcessIdentity(pid=5151, host="build-agent-02", process_name="worker-b")
