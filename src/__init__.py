"""MCP Prompt Server - file-based prompt templates served as named operations.

Loads prompt templates from JSON, YAML and Markdown files, validates caller
arguments and renders role-tagged messages.

Note: Module name intentionally kept as-is to match the package layout.
"""  # noqa: N999

__version__ = "1.0.0"

from .config import settings

__all__ = [
    "settings",
]
