"""Shared utilities for logging and timing."""

from .monitoring import log_error_with_context, performance_timer, setup_logging

__all__ = [
    "log_error_with_context",
    "performance_timer",
    "setup_logging",
]
