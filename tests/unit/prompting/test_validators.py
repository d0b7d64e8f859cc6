"""Unit tests for prompting validators.

Covers required-argument presence and detection of template variables that
neither the caller nor the template declaration can satisfy.
"""

from __future__ import annotations

import pytest

from src.prompting.validators import (
    extract_template_variables,
    find_missing_arguments,
    find_unbound_references,
    validate_template,
)


@pytest.fixture
def two_required(template_factory):
    return template_factory(
        "pair",
        arguments=[
            {"name": "first", "description": "", "required": True},
            {"name": "opt", "description": "", "required": False},
            {"name": "second", "description": "", "required": True},
        ],
        messages=[("user", "{{first}} {{second}} {{opt}}")],
    )


@pytest.mark.unit
def test_missing_required_reported_in_declaration_order(two_required) -> None:
    """Test that every missing required argument is reported, in order."""
    assert find_missing_arguments(two_required, {}) == ["first", "second"]
    assert find_missing_arguments(two_required, {"second": "x"}) == ["first"]


@pytest.mark.unit
def test_none_counts_as_missing_but_empty_string_does_not(two_required) -> None:
    args = {"first": None, "second": ""}
    assert find_missing_arguments(two_required, args) == ["first"]


@pytest.mark.unit
def test_greet_without_who_fails(greet_template) -> None:
    result = validate_template(greet_template, {})
    assert not result.is_valid
    assert result.missing_args == ("who",)
    assert result.errors == ()


@pytest.mark.unit
def test_none_args_treated_as_empty(greet_template) -> None:
    assert validate_template(greet_template, None).missing_args == ("who",)


@pytest.mark.unit
def test_valid_args_pass(greet_template) -> None:
    result = validate_template(greet_template, {"who": "World"})
    assert result.is_valid


@pytest.mark.unit
def test_unbound_reference_detected_once(template_factory) -> None:
    """Test that an undeclared, unsupplied variable is reported once."""
    tpl = template_factory(
        "t",
        messages=[("user", "Hi {{ nick }}"), ("assistant", "Bye {{nick}}")],
    )
    errors = find_unbound_references(tpl, {})
    assert errors == ["No argument is declared for template variable 'nick'"]
    result = validate_template(tpl, {})
    assert not result.is_valid
    assert result.missing_args == ()


@pytest.mark.unit
def test_supplied_extra_argument_binds_reference(template_factory) -> None:
    tpl = template_factory("t", messages=[("user", "Hi {{nick}}")])
    assert find_unbound_references(tpl, {"nick": "Bo"}) == []


@pytest.mark.unit
def test_declared_optional_argument_is_not_unbound(template_factory) -> None:
    tpl = template_factory(
        "t",
        arguments=[{"name": "nick", "description": "", "required": False}],
        messages=[("user", "Hi {{nick}}")],
    )
    assert validate_template(tpl, {}).is_valid


@pytest.mark.unit
def test_legacy_and_empty_bodies_are_skipped(template_factory) -> None:
    tpl = template_factory(
        "t",
        messages=[("user", "Do $ARGUMENTS with {{thing}}"), ("assistant", "")],
    )
    assert find_unbound_references(tpl, {}) == []


@pytest.mark.unit
def test_extract_ignores_helpers_else_and_raw_blocks() -> None:
    text = (
        "{{#eq a b}}{{x}}{{else}}{{ y }}{{/eq}} {{{z}}} "
        "{{{{raw}}}}{{hidden}}{{{{/raw}}}} {{x}}"
    )
    assert extract_template_variables(text) == ["x", "y", "z"]
