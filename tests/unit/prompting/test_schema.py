"""Unit tests for the argument schema builder."""

from __future__ import annotations

import pytest

from src.prompting.models import ArgumentPresence
from src.prompting.schema import build_argument_schema


@pytest.mark.unit
def test_no_arguments_yields_none(template_factory) -> None:
    tpl = template_factory("plain", messages=[("user", "hi")])
    assert build_argument_schema(tpl) is None


@pytest.mark.unit
def test_schema_copies_required_flags_in_order(template_factory) -> None:
    tpl = template_factory(
        "t",
        arguments=[
            {"name": "b", "description": "", "required": False},
            {"name": "a", "description": "", "required": True},
        ],
    )
    schema = build_argument_schema(tpl)
    assert schema == {
        "b": ArgumentPresence.OPTIONAL,
        "a": ArgumentPresence.REQUIRED,
    }
    assert list(schema) == ["b", "a"]
