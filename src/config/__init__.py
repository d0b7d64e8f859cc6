"""Unified configuration interface for the prompt server.

Usage:
    from src.config import settings
"""

from .settings import LoggingConfig, PromptServerSettings, settings

__all__ = [
    "LoggingConfig",
    "PromptServerSettings",
    "settings",
]
