"""Constants and default values for simple-file-lock.

This module centralizes defaults and environment variable names used
throughout the package.
"""

from pathlib import Path

# ==================== LOCK DEFAULTS ====================

DEFAULT_LOCK_DIR: Path = Path.home() / ".simple_file_lock" / "locks"
DEFAULT_LOCK_TIMEOUT_SECONDS: float = 300.0  # Staleness threshold (5 minutes)
LOCK_FILE_SUFFIX: str = ".lock"
LOCK_RECORD_VERSION: int = 1

# Length of the digest suffix appended to sanitized lock names
LOCK_NAME_DIGEST_LENGTH: int = 8

# ==================== LOGGING DEFAULTS ====================

DEFAULT_LOG_LEVEL: str = "INFO"
DEFAULT_LOG_FORMAT: str = "text"
VALID_LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_LOG_FORMATS: tuple[str, ...] = ("text", "json")
LOG_FILE_MAX_BYTES: int = 10 * 1024 * 1024  # 10MB max per log file
LOG_FILE_BACKUP_COUNT: int = 5  # Number of backup log files to keep

# ==================== ENVIRONMENT VARIABLES ====================

ENV_LOCK_DIR: str = "SIMPLE_FILE_LOCK_DIR"
ENV_LOCK_TIMEOUT: str = "SIMPLE_FILE_LOCK_TIMEOUT"
ENV_LOG_LEVEL: str = "LOG_LEVEL"
ENV_LOG_FORMAT: str = "LOG_FORMAT"
