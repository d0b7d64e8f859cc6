"""Argument validators for prompt templates.

Two independent, pure checks over ``(template, args)``:

* required-argument presence, reported in declaration order;
* unbound ``{{name}}`` references, i.e. names neither supplied by the caller
  nor declared by the template.

Both checks run to completion so callers get the full picture in one call.
The validator only reports; deciding whether unbound references are fatal is
left to the caller.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from loguru import logger

from .models import PromptTemplate, ValidationResult
from .strategies import ARGUMENTS_MARKER, strip_raw_blocks

_VARIABLE_PATTERN = re.compile(r"\{\{\s*([A-Za-z_]\w*)\s*\}\}")
_KEYWORDS = frozenset({"else", "this"})


def extract_template_variables(text: str) -> list[str]:
    """Return the ``{{name}}`` references in ``text`` in order of appearance.

    Helper invocations (``{{#eq a b}}``), closing tags, ``{{else}}`` and raw
    block contents are not variable references.
    """
    names: list[str] = []
    for match in _VARIABLE_PATTERN.finditer(strip_raw_blocks(text)):
        name = match.group(1)
        if name not in _KEYWORDS and name not in names:
            names.append(name)
    return names


def find_missing_arguments(
    template: PromptTemplate, args: Mapping[str, Any]
) -> list[str]:
    """Return required argument names with no value in ``args``."""
    missing = [
        arg.name
        for arg in template.arguments
        if arg.required and args.get(arg.name) is None
    ]
    for name in missing:
        logger.warning("Missing required argument '{}' for '{}'", name, template.name)
    return missing


def find_unbound_references(
    template: PromptTemplate, args: Mapping[str, Any]
) -> list[str]:
    """Return diagnostics for references that nothing can satisfy."""
    declared = {arg.name for arg in template.arguments}
    errors: list[str] = []
    reported: set[str] = set()
    for message in template.messages:
        text = message.content.text
        if not text or ARGUMENTS_MARKER in text:
            continue
        for name in extract_template_variables(text):
            if name in args or name in declared or name in reported:
                continue
            reported.add(name)
            errors.append(f"No argument is declared for template variable '{name}'")
    return errors


def validate_template(
    template: PromptTemplate, args: Mapping[str, Any] | None
) -> ValidationResult:
    """Validate ``args`` against ``template`` without rendering anything.

    Args:
        template: Loaded prompt template.
        args: Caller-supplied argument map (``None`` is treated as empty).

    Returns:
        ValidationResult whose ``is_valid`` is True only when no required
        argument is missing and no reference is unbound.
    """
    args = args or {}
    result = ValidationResult(
        missing_args=tuple(find_missing_arguments(template, args)),
        errors=tuple(find_unbound_references(template, args)),
    )
    if result.is_valid:
        logger.debug("Validation passed for '{}'", template.name)
    else:
        logger.warning(
            "Validation failed for '{}': missing=[{}] errors=[{}]",
            template.name,
            ", ".join(result.missing_args),
            "; ".join(result.errors),
        )
    return result


__all__ = [
    "extract_template_variables",
    "find_missing_arguments",
    "find_unbound_references",
    "validate_template",
]
