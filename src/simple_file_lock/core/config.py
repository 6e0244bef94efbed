"""Configuration dataclass for simple-file-lock.

`LockConfig` gathers the lock directory, staleness timeout and logging
options. It can be built directly in code or from the environment, in which
case variables from a `.env` file fill in whatever the environment lacks.
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from dotenv import dotenv_values, find_dotenv

from simple_file_lock.core.constants import (
    DEFAULT_LOCK_DIR,
    DEFAULT_LOCK_TIMEOUT_SECONDS,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    ENV_LOCK_DIR,
    ENV_LOCK_TIMEOUT,
    ENV_LOG_FORMAT,
    ENV_LOG_LEVEL,
    VALID_LOG_FORMATS,
    VALID_LOG_LEVELS,
)
from simple_file_lock.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _read_dotenv(env_file: str | Path | None) -> dict[str, str]:
    """Read variables from a .env file, searching upward from the working directory by default."""
    path = str(env_file) if env_file is not None else find_dotenv(usecwd=True)
    if not path or not Path(path).is_file():
        logger.debug(".env file not found")
        return {}
    logger.debug(".env file found and loaded: %s", path)
    return {key: value for key, value in dotenv_values(path).items() if value is not None}


@dataclass
class LockConfig:
    """Configuration for file locks.

    Attributes:
        lock_dir: Directory holding lock files (default: ~/.simple_file_lock/locks)
        timeout_seconds: Age after which a foreign lock is reclaimable (default: 300)
        log_level: Logging level string (default: "INFO")
        log_format: "text" or "json" (default: "text")
    """

    lock_dir: Path = field(default_factory=lambda: DEFAULT_LOCK_DIR)
    timeout_seconds: float = DEFAULT_LOCK_TIMEOUT_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_LOG_FORMAT

    def __post_init__(self) -> None:
        self.lock_dir = Path(self.lock_dir).expanduser()
        if self.timeout_seconds < 0:
            raise ConfigurationError(
                "Lock timeout must not be negative",
                field="timeout_seconds",
                details=f"got {self.timeout_seconds}",
            )
        if not math.isfinite(self.timeout_seconds) or self.timeout_seconds >= timedelta.max.total_seconds():
            raise ConfigurationError(
                "Lock timeout must be a finite number of seconds",
                field="timeout_seconds",
                details=f"got {self.timeout_seconds}",
            )
        self.log_level = self.log_level.upper()
        if self.log_level not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level '{self.log_level}'",
                field="log_level",
                details=f"expected one of {', '.join(VALID_LOG_LEVELS)}",
            )
        self.log_format = self.log_format.lower()
        if self.log_format not in VALID_LOG_FORMATS:
            raise ConfigurationError(
                f"Invalid log format '{self.log_format}'",
                field="log_format",
                details=f"expected one of {', '.join(VALID_LOG_FORMATS)}",
            )

    @property
    def timeout(self) -> timedelta:
        return timedelta(seconds=self.timeout_seconds)

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        *,
        load_env_file: bool = True,
        env_file: str | Path | None = None,
    ) -> LockConfig:
        """Build configuration from environment variables.

        Values from a ``.env`` file fill in variables missing from the
        environment; real environment variables always win.

        Args:
            env: Mapping to read instead of ``os.environ``
            load_env_file: Merge in a ``.env`` file
            env_file: Explicit ``.env`` path (default: search from the working directory)

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        source: dict[str, str] = _read_dotenv(env_file) if load_env_file else {}
        source.update(os.environ if env is None else env)

        timeout_raw = source.get(ENV_LOCK_TIMEOUT)
        timeout_seconds = DEFAULT_LOCK_TIMEOUT_SECONDS
        if timeout_raw is not None and timeout_raw.strip():
            try:
                timeout_seconds = float(timeout_raw)
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid {ENV_LOCK_TIMEOUT} value '{timeout_raw}'",
                    field="timeout_seconds",
                    details="expected a number of seconds",
                ) from e

        lock_dir_raw = source.get(ENV_LOCK_DIR, "").strip()
        return cls(
            lock_dir=Path(lock_dir_raw) if lock_dir_raw else DEFAULT_LOCK_DIR,
            timeout_seconds=timeout_seconds,
            log_level=source.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).strip() or DEFAULT_LOG_LEVEL,
            log_format=source.get(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT).strip() or DEFAULT_LOG_FORMAT,
        )
