"""Structured logging configuration using loguru."""

import sys
import threading
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from loguru import logger

from ..config.loader import get_config

# Context variables for structured logging
stage_context: ContextVar[str | None] = ContextVar("stage", default=None)
run_id_context: ContextVar[str | None] = ContextVar("run_id", default=None)

_warned_keys: set[str] = set()
_warned_lock = threading.Lock()


def setup_logging(
    level: str = "INFO",
    format_type: str = "json",
    file_path: str | None = None,
    max_file_size_mb: int = 100,
    backup_count: int = 5,
    include_stage: bool = True,
    include_run_id: bool = True,
    include_timestamps: bool = True,
    console_enabled: bool = True,
) -> None:
    """Set up structured logging configuration.

    Invalid logging level names fall back to 'INFO'.
    """
    logger.remove()
    logger.configure(extra={"stage": "-", "run_id": "-"})

    format_parts = []

    if include_timestamps:
        format_parts.append("<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green>")

    format_parts.append("<level>{level: <8}</level>")

    if include_stage:
        format_parts.append("<cyan>{extra[stage]: <12}</cyan>")

    if include_run_id:
        format_parts.append("<magenta>{extra[run_id]: <8}</magenta>")

    format_parts.append("<level>{message}</level>")

    if format_type == "json":
        log_format = "{message}"
        serialize = True
    else:
        log_format = " | ".join(format_parts)
        serialize = False

    safe_level = "INFO"
    try:
        logger.level(level)
        safe_level = level
    except ValueError:
        safe_level = "INFO"

    if console_enabled:
        logger.add(
            sys.stdout,
            level=safe_level,
            format=log_format,
            serialize=serialize,
            colorize=format_type != "json",
        )

    if file_path:
        log_file_path = Path(file_path)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_file_path,
            level=safe_level,
            format=log_format,
            serialize=serialize,
            rotation=f"{max_file_size_mb} MB",
            retention=backup_count,
            encoding="utf-8",
        )

    if safe_level != level:
        logger.warning(f"Invalid logging level '{level}' provided; falling back to 'INFO'")


def configure_logging_from_config() -> None:
    """Configure logging using the current configuration."""
    config = get_config()

    setup_logging(
        level=config.logging.level,
        format_type=config.logging.format,
        file_path=config.logging.file_path if config.logging.file_enabled else None,
        max_file_size_mb=config.logging.max_file_size_mb,
        backup_count=config.logging.backup_count,
        include_stage=config.logging.include_stage,
        include_run_id=config.logging.include_run_id,
        include_timestamps=config.logging.include_timestamps,
        console_enabled=config.logging.console_enabled,
    )


class LogContext:
    """Context manager for adding context to log messages."""

    def __init__(self, stage: str | None = None, run_id: str | None = None):
        self.stage = stage
        self.run_id = run_id
        self.stage_token = None
        self.run_id_token = None

    def __enter__(self):
        if self.stage is not None:
            self.stage_token = stage_context.set(self.stage)
        if self.run_id is not None:
            self.run_id_token = run_id_context.set(self.run_id)

        extra = {}
        if self.stage:
            extra["stage"] = self.stage
        if self.run_id:
            extra["run_id"] = self.run_id

        if extra:
            return logger.bind(**extra)
        return logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.stage_token is not None:
            stage_context.reset(self.stage_token)
        if self.run_id_token is not None:
            run_id_context.reset(self.run_id_token)


def log_with_context(stage: str | None = None, run_id: str | None = None) -> LogContext:
    """Context manager that yields a logger bound to stage/run_id."""
    return LogContext(stage=stage, run_id=run_id)


def bound_logger():
    """Logger bound to the stage/run_id of the current context."""
    return logger.bind(stage=stage_context.get() or "-", run_id=run_id_context.get() or "-")


def warn_once(key: str, message: str, **context: Any) -> bool:
    """Emit a warning the first time `key` is seen in this process.

    Returns True when the warning was emitted, False when it was suppressed.
    """
    with _warned_lock:
        if key in _warned_keys:
            return False
        _warned_keys.add(key)

    bound_logger().bind(warn_key=key, **context).warning(message)
    return True


def reset_warn_once_registry() -> None:
    """Forget every key recorded by `warn_once` (tests only)."""
    with _warned_lock:
        _warned_keys.clear()
