"""Rendering strategies and the strategy selector.

Each strategy declares whether it applies to a raw message body and, if so,
renders it against an argument map. Strategies are tried in a fixed order and
the first match wins. ``LegacyArgumentsStrategy`` must precede the catch-all
``HandlebarsStrategy``: a ``$ARGUMENTS`` body would otherwise be handed to the
Handlebars compiler untouched.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from loguru import logger
from pybars import Compiler

from .errors import NoApplicableStrategyError, RenderError
from .helpers import build_helpers

ARGUMENTS_MARKER = "$ARGUMENTS"
ARGUMENTS_KEY = "ARGUMENTS"
MISSING_ARGUMENTS_FALLBACK = (
    f"{ARGUMENTS_MARKER} (The user did not provide input. "
    "Ask the user for the value, or infer it and fill it in.)"
)

RAW_BLOCK_PATTERN = re.compile(
    r"\{\{\{\{\s*raw\s*\}\}\}\}(.*?)\{\{\{\{\s*/\s*raw\s*\}\}\}\}", re.DOTALL
)

_PREVIEW_CHARS = 100


@runtime_checkable
class TemplateStrategy(Protocol):
    """Interface implemented by every rendering strategy."""

    name: str

    def applies(self, body: str) -> bool:
        """Return True when this strategy can render ``body``."""
        ...

    def render(self, body: str, args: Mapping[str, Any]) -> str:
        """Render ``body`` against ``args``; only called when ``applies``."""
        ...


class LegacyArgumentsStrategy:
    """Single free-text slot: replaces every ``$ARGUMENTS`` marker."""

    name = "legacy-arguments"

    def applies(self, body: str) -> bool:
        return ARGUMENTS_MARKER in body

    def render(self, body: str, args: Mapping[str, Any]) -> str:
        value = args.get(ARGUMENTS_KEY) or MISSING_ARGUMENTS_FALLBACK
        logger.debug("Substituting {} with {!r}", ARGUMENTS_MARKER, value)
        return body.replace(ARGUMENTS_MARKER, str(value))


class HandlebarsStrategy:
    """Logic-enabled Handlebars rendering via pybars3 (catch-all)."""

    name = "handlebars"

    def __init__(self) -> None:
        self._compiler = Compiler()
        self._helpers = build_helpers()
        logger.debug(
            "Handlebars helpers registered: {}", ", ".join(sorted(self._helpers))
        )

    def applies(self, body: str) -> bool:
        return True

    def render(self, body: str, args: Mapping[str, Any]) -> str:
        if not isinstance(body, str) or not body:
            raise RenderError("Template body must be a non-empty string")
        source, raw_blocks = _protect_raw_blocks(body)
        try:
            check_template_syntax(source)
            compiled = self._compiler.compile(source)
            result = str(compiled(dict(args or {}), helpers=dict(self._helpers)))
        except Exception as exc:
            preview = body[:_PREVIEW_CHARS]
            if len(body) > _PREVIEW_CHARS:
                preview += "..."
            logger.error(
                "Handlebars rendering failed: {} (template={!r}, variables=[{}])",
                exc,
                preview,
                ", ".join(args or {}),
            )
            raise RenderError("Template rendering failed", exc) from exc
        for placeholder, content in raw_blocks.items():
            result = result.replace(placeholder, content)
        return result


class TemplateSyntaxError(ValueError):
    """Raised when a Handlebars body is not well formed."""


def check_template_syntax(source: str) -> None:
    """Reject unterminated tags and unbalanced block tags.

    pybars3 stops at the first construct it cannot parse and returns the
    output rendered so far, so these checks run before compiling.

    Raises:
        TemplateSyntaxError: On the first problem found.
    """
    blocks: list[tuple[str, int]] = []
    pos = 0
    while (start := source.find("{{", pos)) != -1:
        if source.startswith("{{!--", start):
            end = source.find("--}}", start + 5)
            if end == -1:
                raise TemplateSyntaxError(f"Unclosed comment at offset {start}")
            pos = end + 4
            continue
        closer = "}}}" if source.startswith("{{{", start) else "}}"
        end = source.find(closer, start + 2)
        if end == -1:
            raise TemplateSyntaxError(f"Unclosed tag at offset {start}")
        inner = source[start + 2 : end].lstrip("{").strip().strip("~").strip()
        if "{{" in inner:
            raise TemplateSyntaxError(f"Unclosed tag at offset {start}")
        pos = end + len(closer)

        if inner[:1] in ("#", "^"):
            parts = inner[1:].split()
            if not parts:
                raise TemplateSyntaxError(f"Block tag without a name at {start}")
            blocks.append((parts[0], start))
        elif inner[:1] == "/":
            name = inner[1:].strip()
            if not blocks:
                raise TemplateSyntaxError(f"Unexpected closing tag '{{{{/{name}}}}}'")
            opened, _ = blocks.pop()
            if opened != name:
                raise TemplateSyntaxError(
                    f"'{{{{/{name}}}}}' does not close '{{{{#{opened}}}}}'"
                )
    if blocks:
        name, offset = blocks[-1]
        raise TemplateSyntaxError(
            f"Unclosed block '{{{{#{name}}}}}' at offset {offset}"
        )


def _protect_raw_blocks(body: str) -> tuple[str, dict[str, str]]:
    """Swap ``{{{{raw}}}}`` block contents for placeholders.

    The compiler never sees raw contents, so they come back verbatim after
    rendering.
    """
    blocks: dict[str, str] = {}
    token = uuid.uuid4().hex

    def _swap(match: re.Match[str]) -> str:
        placeholder = f"@@RAW_{token}_{len(blocks)}@@"
        blocks[placeholder] = match.group(1)
        return placeholder

    return RAW_BLOCK_PATTERN.sub(_swap, body), blocks


def strip_raw_blocks(body: str) -> str:
    """Return ``body`` with raw block contents removed."""
    return RAW_BLOCK_PATTERN.sub("", body)


DEFAULT_STRATEGIES: tuple[TemplateStrategy, ...] = (
    LegacyArgumentsStrategy(),
    HandlebarsStrategy(),
)


def select_strategy(
    body: str, strategies: Sequence[TemplateStrategy] = DEFAULT_STRATEGIES
) -> TemplateStrategy:
    """Return the first strategy whose ``applies`` accepts ``body``.

    Raises:
        NoApplicableStrategyError: If no strategy applies.
    """
    for strategy in strategies:
        if strategy.applies(body):
            return strategy
    raise NoApplicableStrategyError(
        "No rendering strategy is able to process the template body"
    )


__all__ = [
    "ARGUMENTS_KEY",
    "ARGUMENTS_MARKER",
    "DEFAULT_STRATEGIES",
    "MISSING_ARGUMENTS_FALLBACK",
    "HandlebarsStrategy",
    "LegacyArgumentsStrategy",
    "TemplateStrategy",
    "TemplateSyntaxError",
    "check_template_syntax",
    "select_strategy",
    "strip_raw_blocks",
]
