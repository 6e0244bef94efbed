"""Logging helpers for simple-file-lock."""

import contextlib
import json
import logging
import os
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from simple_file_lock.core.constants import (
    DEFAULT_LOG_LEVEL,
    ENV_LOG_LEVEL,
    LOG_FILE_BACKUP_COUNT,
    LOG_FILE_MAX_BYTES,
    VALID_LOG_LEVELS,
)

if TYPE_CHECKING:
    from simple_file_lock.core.config import LockConfig

_LOG_RECORD_RESERVED_FIELDS = set(logging.makeLogRecord({}).__dict__.keys()) | {"message", "asctime", "extra_fields"}


def _safe_str(value: object) -> str:
    try:
        return str(value)
    except Exception:
        return "<unprintable>"


def _safe_record_message(record: logging.LogRecord) -> str:
    try:
        return record.getMessage()
    except Exception:
        # Keep logging resilient when message formatting fails (bad placeholders or broken __str__).
        return f"{_safe_str(getattr(record, 'msg', ''))} [log-message-format-error]"


def _is_reserved_or_private_record_key(key: object) -> bool:
    if not isinstance(key, str):
        return True
    return key in _LOG_RECORD_RESERVED_FIELDS or key.startswith("_")


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging output.

    Each log record is a single JSON object on one line. Context fields added
    through `with_log_context` or ``extra=`` appear as top-level keys.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": _safe_record_message(record),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "process": record.process,
            "thread_name": record.threadName,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra_fields = {}
        record_extra_fields = getattr(record, "extra_fields", None)
        if isinstance(record_extra_fields, dict):
            extra_fields.update(record_extra_fields)

        for key, value in record.__dict__.items():
            if _is_reserved_or_private_record_key(key):
                continue
            extra_fields.setdefault(key, value)

        log_entry.update(extra_fields)
        return json.dumps(log_entry, default=str)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges contextual fields into record extras."""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        extra = kwargs.get("extra")
        merged_extra = dict(self.extra)
        if isinstance(extra, dict):
            merged_extra.update(extra)
        kwargs["extra"] = merged_extra
        return msg, kwargs


def _unwrap_logger(logger: logging.Logger | logging.LoggerAdapter | None) -> logging.Logger | None:
    current = logger
    while isinstance(current, logging.LoggerAdapter):
        current = current.logger
    if isinstance(current, logging.Logger):
        return current
    return None


def with_log_context(
    logger: logging.Logger | logging.LoggerAdapter | object, **context: object
) -> logging.Logger | logging.LoggerAdapter | object:
    """Return a logger enriched with persistent contextual fields."""
    if not isinstance(logger, (logging.Logger, logging.LoggerAdapter)):
        # Preserve test doubles/mocks that may not satisfy logging interfaces.
        return logger

    base_logger = _unwrap_logger(logger)
    if base_logger is None:
        return logger

    normalized_context = {k: v for k, v in context.items() if v is not None}
    existing_context = {}
    if isinstance(logger, logging.LoggerAdapter):
        existing_context = dict(getattr(logger, "extra", {}))

    existing_context.update(normalized_context)
    return ContextLoggerAdapter(base_logger, existing_context)


def setup_logging(
    log_level: str | None = None, log_format: str = "text", log_file: str | Path | None = None
) -> logging.Logger:
    """Setup logging to the console and, optionally, a rotating log file.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format - "text" (default) or "json" for structured logging
        log_file: Optional path of a log file; its directory is created if needed

    Returns:
        The package logger

    Priority: 1) Passed parameter, 2) Environment variable LOG_LEVEL, 3) Default INFO
    """
    if log_level is None:
        log_level = os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)

    if log_level.upper() not in VALID_LOG_LEVELS:
        print(f"Warning: Invalid log level '{log_level}', using INFO", file=sys.stderr)
        log_level = DEFAULT_LOG_LEVEL

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    # Clear any existing handlers from root logger
    for handler in logging.root.handlers[:]:
        handler.close()
        logging.root.removeHandler(handler)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_path = Path(log_file)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(
                RotatingFileHandler(log_path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUP_COUNT)
            )
        except OSError as e:
            print(f"Warning: Cannot open log file {log_path}: {e}. Logging to console only.", file=sys.stderr)

    if log_format.lower() == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(numeric_level)
        logging.root.addHandler(handler)

    logging.root.setLevel(numeric_level)

    logger = logging.getLogger("simple_file_lock")
    logger.propagate = True
    logger.setLevel(logging.NOTSET)

    for handler in logging.root.handlers:
        with contextlib.suppress(Exception):
            handler.flush()

    return logger


def setup_logging_from_config(config: "LockConfig", log_file: str | Path | None = None) -> logging.Logger:
    """Setup logging with the level and format carried by a `LockConfig`."""
    return setup_logging(log_level=config.log_level, log_format=config.log_format, log_file=log_file)
