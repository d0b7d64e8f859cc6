"""Argument schema builder for boundary-level input validation."""

from __future__ import annotations

from .models import ArgumentPresence, PromptTemplate


def build_argument_schema(
    template: PromptTemplate,
) -> dict[str, ArgumentPresence] | None:
    """Return a required/optional marker per declared argument.

    Args:
        template: Loaded prompt template.

    Returns:
        ``None`` when the template declares no arguments (input validation is
        skipped entirely), otherwise a mapping in declaration order.
    """
    if not template.arguments:
        return None
    return {
        arg.name: (
            ArgumentPresence.REQUIRED if arg.required else ArgumentPresence.OPTIONAL
        )
        for arg in template.arguments
    }


__all__ = ["build_argument_schema"]
