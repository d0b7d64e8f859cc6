"""Exception hierarchy for prompt loading, validation and rendering."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class PromptServerError(Exception):
    """Base exception for all prompt server errors."""


class MissingRequiredArgumentError(PromptServerError):
    """Raised when a render call fails argument validation.

    Carries both the missing required argument names and any unbound
    reference diagnostics, exactly as reported by the validator.
    """

    def __init__(
        self,
        missing_args: Sequence[str],
        errors: Sequence[str] = (),
        *,
        template_name: str | None = None,
    ) -> None:
        self.missing_args = tuple(missing_args)
        self.errors = tuple(errors)
        self.template_name = template_name
        super().__init__(
            f"Template processing error: {', '.join(self.errors)}. "
            f"Missing required arguments: {', '.join(self.missing_args)}"
        )


class RenderError(PromptServerError):
    """Raised when a rendering strategy fails to compile or evaluate a body."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class NoApplicableStrategyError(PromptServerError):
    """Raised when no registered rendering strategy accepts a body."""


class TemplateNotFoundError(PromptServerError, KeyError):
    """Raised when a template name is not present in the loaded collection."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Prompt '{name}' not found")

    def __str__(self) -> str:
        return str(self.args[0])


class PromptLoadError(PromptServerError):
    """Raised when a single prompt file cannot be parsed into a template."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path.name}: {reason}")


__all__ = [
    "MissingRequiredArgumentError",
    "NoApplicableStrategyError",
    "PromptLoadError",
    "PromptServerError",
    "RenderError",
    "TemplateNotFoundError",
]
