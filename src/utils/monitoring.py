"""Logging and lightweight timing helpers.

Key features:
- Loguru sink configuration (stderr plus an optional rotating file)
- Error logging with structured context
- Basic operation timing with a context manager
"""

import sys
import time
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from loguru import logger

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
_FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
)


def setup_logging(
    log_level: str = "INFO",
    log_file: str | Path | None = None,
    *,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Configure Loguru sinks.

    Console output goes to stderr so stdio-based transports keep stdout free
    for protocol messages.

    Args:
        log_level: Logging level (e.g., "DEBUG", "INFO", "WARNING", "ERROR").
        log_file: Optional log file path for file output.
        rotation: Loguru rotation policy for the file sink.
        retention: Loguru retention policy for the file sink.
    """
    # Remove default handler
    logger.remove()

    logger.add(sys.stderr, level=log_level, format=_CONSOLE_FORMAT, colorize=True)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_file),
            level=log_level,
            format=_FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            compression="gz",
        )

    logger.info("Logging configured: level={}, file={}", log_level, log_file)


def log_error_with_context(
    error: BaseException,
    operation: str,
    context: dict[str, Any] | None = None,
    **kwargs: Any,
) -> dict[str, Any]:
    """Log a failed operation together with the exception and call context.

    ``context`` and keyword arguments are merged into one record; keyword
    arguments win on key clashes.

    Returns:
        The record that was logged.
    """
    record: dict[str, Any] = {
        "operation": operation,
        "error_type": type(error).__name__,
        "error": str(error),
        **(context or {}),
        **kwargs,
    }
    logger.error("{} failed: {}", operation, record)
    return record


@contextmanager
def performance_timer(operation: str, **context: Any) -> Generator[dict[str, Any]]:
    """Time the wrapped block and log the outcome at debug level.

    The yielded dict may be extended by the caller (e.g. with a count). On
    exit it gains ``duration_ms`` and ``success``; exceptions propagate.
    """
    metrics: dict[str, Any] = {"operation": operation, **context}
    started = time.perf_counter()
    metrics["success"] = False
    try:
        yield metrics
        metrics["success"] = True
    finally:
        metrics["duration_ms"] = round((time.perf_counter() - started) * 1000, 1)
        logger.debug("{} took {} ms {}", operation, metrics["duration_ms"], metrics)


__all__ = ["log_error_with_context", "performance_timer", "setup_logging"]
