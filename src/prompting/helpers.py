"""Handlebars block helpers used by the logic-enabled rendering strategy.

Helpers follow the pybars3 calling convention for block helpers:
``helper(this, options, *args)`` where ``options["fn"]`` renders the block
body and ``options["inverse"]`` renders the ``{{else}}`` branch. The helper
table is built once and never mutated afterwards.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

Helper = Callable[..., Any]


def _branch(this: Any, options: Mapping[str, Any], condition: bool) -> Any:
    return options["fn"](this) if condition else options["inverse"](this)


def _as_list(collection: Any) -> list[Any]:
    """Accept a list/tuple or a JSON array string."""
    if isinstance(collection, (list, tuple)):
        return list(collection)
    parsed = json.loads(collection)
    if not isinstance(parsed, list):
        raise ValueError(f"Expected a JSON array, got {type(parsed).__name__}")
    return parsed


def eq(this: Any, options: Mapping[str, Any], a: Any, b: Any) -> Any:
    return _branch(this, options, a == b)


def eq_ignore_case(this: Any, options: Mapping[str, Any], a: Any, b: Any) -> Any:
    if not isinstance(a, str) or not isinstance(b, str):
        return options["inverse"](this)
    return _branch(this, options, a.casefold() == b.casefold())


def neq(this: Any, options: Mapping[str, Any], a: Any, b: Any) -> Any:
    return _branch(this, options, a != b)


def in_(this: Any, options: Mapping[str, Any], value: Any, collection: Any) -> Any:
    return _branch(this, options, value in _as_list(collection))


def in_ignore_case(
    this: Any, options: Mapping[str, Any], value: Any, collection: Any
) -> Any:
    items = _as_list(collection)
    if not isinstance(value, str):
        return options["inverse"](this)
    folded = [item.casefold() for item in items if isinstance(item, str)]
    return _branch(this, options, value.casefold() in folded)


def starts_with(this: Any, options: Mapping[str, Any], text: Any, prefix: Any) -> Any:
    # Non-string operands take the inverse branch instead of raising.
    if not isinstance(text, str) or not isinstance(prefix, str):
        return options["inverse"](this)
    return _branch(this, options, text.startswith(prefix))


def raw(this: Any, options: Mapping[str, Any]) -> Any:
    return options["fn"](this)


def build_helpers() -> Mapping[str, Helper]:
    """Return the read-only helper table registered with the compiler."""
    return MappingProxyType(
        {
            "eq": eq,
            "eqIgnoreCase": eq_ignore_case,
            "neq": neq,
            "in": in_,
            "inIgnoreCase": in_ignore_case,
            "startsWith": starts_with,
            "raw": raw,
        }
    )


__all__ = ["Helper", "build_helpers"]
