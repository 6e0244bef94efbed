"""Tests for the lock content model."""

from __future__ import annotations

import json
import os
import socket
from datetime import UTC, datetime, timedelta

import pytest

from simple_file_lock.locks.records import (
    LockOwned,
    LockRecord,
    LockUnreadable,
    ProcessIdentity,
    SystemClock,
    parse_lock_content,
)


def _record_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "pid": 1234,
        "host": "shared-host",
        "process_name": "worker",
        "timestamp": "2026-01-01T12:00:00+00:00",
        "version": 1,
    }
    payload.update(overrides)
    return payload


def test_current_identity_reflects_running_process() -> None:
    identity = ProcessIdentity.current()

    assert identity.pid == os.getpid()
    assert identity.host == socket.gethostname()


def test_system_clock_returns_aware_utc_time() -> None:
    now = SystemClock().now()

    assert now.tzinfo is not None
    assert now.utcoffset() == timedelta(0)


def test_for_context_freezes_identity_and_clock(clock, identity_a) -> None:
    record = LockRecord.for_context(identity_a, clock)

    assert record.pid == identity_a.pid
    assert record.host == identity_a.host
    assert record.process_name == identity_a.process_name
    assert record.timestamp == clock.now()


def test_encoded_record_parses_back_to_owned(clock, identity_a) -> None:
    record = LockRecord.for_context(identity_a, clock)

    probe = parse_lock_content(record.encode())

    assert probe == LockOwned(record=record)


def test_encoding_is_single_json_line(clock, identity_a) -> None:
    encoded = LockRecord.for_context(identity_a, clock).encode()

    assert encoded.endswith(b"\n")
    assert encoded.count(b"\n") == 1
    assert json.loads(encoded)["pid"] == identity_a.pid


def test_ownership_requires_same_pid_and_host(identity_a) -> None:
    record = LockRecord(pid=identity_a.pid, host="BUILD-AGENT-01", process_name="", timestamp=datetime.now(UTC))

    assert record.is_owned_by(identity_a) is True
    assert record.is_owned_by(ProcessIdentity(pid=identity_a.pid + 1, host=identity_a.host)) is False
    assert record.is_owned_by(ProcessIdentity(pid=identity_a.pid, host="other-host")) is False


def test_age_is_absolute_difference(clock, identity_a) -> None:
    record = LockRecord.for_context(identity_a, clock)

    assert record.age_seconds(clock.now() + timedelta(seconds=12)) == pytest.approx(12.0)
    # A timestamp in the future (clock skew) still counts as elapsed time.
    assert record.age_seconds(clock.now() - timedelta(seconds=12)) == pytest.approx(12.0)


def test_naive_timestamp_is_read_as_utc() -> None:
    probe = parse_lock_content(json.dumps(_record_payload(timestamp="2026-01-01T12:00:00")))

    assert isinstance(probe, LockOwned)
    assert probe.record.timestamp == datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)


def test_text_content_is_accepted() -> None:
    probe = parse_lock_content(json.dumps(_record_payload()))

    assert isinstance(probe, LockOwned)
    assert probe.record.host == "shared-host"


def test_missing_process_name_defaults_to_empty() -> None:
    payload = _record_payload()
    del payload["process_name"]

    probe = parse_lock_content(json.dumps(payload))

    assert isinstance(probe, LockOwned)
    assert probe.record.process_name == ""


@pytest.mark.parametrize(
    "raw",
    [
        b"",
        b"{bad json",
        b"\xff\xfe\x00garbage",
        b"[1, 2, 3]",
        b'"just a string"',
        json.dumps({"host": "h", "timestamp": "2026-01-01T00:00:00+00:00"}).encode(),
        json.dumps(_record_payload(pid="1234")).encode(),
        json.dumps(_record_payload(pid=True)).encode(),
        json.dumps(_record_payload(host="")).encode(),
        json.dumps(_record_payload(host=None)).encode(),
        json.dumps(_record_payload(timestamp="yesterday")).encode(),
        json.dumps(_record_payload(timestamp=None)).encode(),
        json.dumps(_record_payload(version="one")).encode(),
        b'{"host": "h", "pid": 1, "timestamp": "2026-01-01T00:00:00+00:00", "version": Infinity}',
        b'{"host": "h", "pid": 1, "timestamp": "2026-01-01T00:00:00+00:00", "version": NaN}',
        b"[" * 100_000,
    ],
)
def test_malformed_content_is_unreadable(raw: bytes) -> None:
    probe = parse_lock_content(raw)

    assert isinstance(probe, LockUnreadable)
    assert probe.reason
