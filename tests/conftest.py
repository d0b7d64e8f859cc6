"""Top-level pytest configuration and shared fixtures.

Provides ready-made templates and on-disk prompt directories so tests at
every tier build inputs the same way.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest
import yaml

from src.prompting.models import PromptTemplate
from src.prompting.registry import get_registry


def make_template(
    name: str = "greet",
    *,
    description: str = "",
    arguments: list[dict] | None = None,
    messages: list[tuple[str, str]] | None = None,
) -> PromptTemplate:
    """Build a PromptTemplate from compact ``(role, text)`` message tuples."""
    return PromptTemplate.model_validate(
        {
            "name": name,
            "description": description,
            "arguments": arguments or [],
            "messages": [
                {"role": role, "content": {"type": "text", "text": text}}
                for role, text in (messages or [])
            ],
        }
    )


@pytest.fixture
def template_factory() -> Callable[..., PromptTemplate]:
    """Expose :func:`make_template` to tests."""
    return make_template


@pytest.fixture
def greet_template() -> PromptTemplate:
    """The canonical single-argument greeting template."""
    return make_template(
        "greet",
        arguments=[{"name": "who", "description": "x", "required": True}],
        messages=[("user", "Hello {{who}}!")],
    )


@pytest.fixture
def prompts_dir(tmp_path: Path) -> Path:
    """Directory holding one prompt per supported format plus broken files."""
    root = tmp_path / "prompts"
    root.mkdir()

    (root / "greet.yaml").write_text(
        yaml.safe_dump(
            {
                "name": "greet",
                "description": "Say hello",
                "arguments": [
                    {"name": "who", "description": "Who to greet", "required": True}
                ],
                "messages": [
                    {
                        "role": "system",
                        "content": {"type": "text", "text": "Hello {{who}}!"},
                    }
                ],
            }
        ),
        encoding="utf-8",
    )
    (root / "summarize.json").write_text(
        json.dumps(
            {
                "name": "summarize",
                "description": "Summarize a document",
                "arguments": [
                    {"name": "doc", "description": "Document", "required": True},
                    {"name": "style", "description": "Style", "required": False},
                ],
                "messages": [
                    {
                        "role": "user",
                        "content": {
                            "type": "text",
                            "text": "Summarize {{doc}}."
                            "{{#if style}} Style: {{style}}.{{/if}}",
                        },
                    },
                    {
                        "role": "assistant",
                        "content": {"type": "text", "text": "Sure."},
                    },
                ],
            }
        ),
        encoding="utf-8",
    )
    (root / "fix.md").write_text(
        "# Fix **the** bug\n\nPlease fix: $ARGUMENTS\n", encoding="utf-8"
    )
    (root / "broken.json").write_text("{not json", encoding="utf-8")
    (root / "invalid_role.yaml").write_text(
        yaml.safe_dump(
            {
                "name": "bad-role",
                "description": "d",
                "messages": [
                    {"role": "robot", "content": {"type": "text", "text": "hi"}}
                ],
            }
        ),
        encoding="utf-8",
    )
    (root / "notes.txt").write_text("not a prompt", encoding="utf-8")
    return root


@pytest.fixture(autouse=True)
def _reset_registry_cache() -> None:
    """Ensure the process-wide registry is rebuilt for every test."""
    get_registry.cache_clear()
