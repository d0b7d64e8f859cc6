"""Integration tests: load the bundled prompt directory and render it."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from src.prompting import (
    MissingRequiredArgumentError,
    PromptRegistry,
    TemplateNotFoundError,
    get_registry,
)
from src.server.handlers import GET_PROMPT_NAMES, RELOAD_PROMPTS, PromptHandlers

pytestmark = pytest.mark.integration

BUNDLED_PROMPTS = Path(__file__).resolve().parents[2] / "prompts"


@pytest.fixture
def bundled() -> PromptRegistry:
    return PromptRegistry([BUNDLED_PROMPTS])


def test_bundled_prompts_load(bundled) -> None:
    assert set(bundled.list_names()) == {"code_review", "compare", "fix", "greet"}


def test_bundled_greet_renders(bundled) -> None:
    response = bundled.render("greet", {"who": "World"})
    assert response.messages[0].content.text == "Hello World!"


def test_bundled_code_review_branches(bundled) -> None:
    code = "if a < b: pass"
    with_lang = bundled.render(
        "code_review", {"code": code, "language": "Python", "format": "bullets"}
    )
    texts = [m.content.text for m in with_lang.messages]
    assert all(m.role == "user" for m in with_lang.messages)
    assert "Python" in texts[0]
    # Triple-stash keeps code unescaped.
    assert code in texts[1]

    without = bundled.render("code_review", {"code": code})
    assert "Python" not in without.messages[0].content.text


def test_bundled_legacy_prompt_fallback(bundled) -> None:
    text = bundled.render("fix").messages[0].content.text
    assert "The user did not provide input." in text


def test_bundled_numbered_parameters_are_optional(bundled) -> None:
    info = bundled.get_info("compare")
    assert [(a.name, a.required) for a in info.arguments] == [
        ("1", False),
        ("2", False),
    ]
    text = bundled.render("compare").messages[0].content.text
    assert "$1" in text
    assert "$2" in text


def test_reload_picks_up_new_files(prompts_dir: Path, tmp_path: Path) -> None:
    live = tmp_path / "live"
    shutil.copytree(prompts_dir, live)
    handlers = PromptHandlers(PromptRegistry([live]))
    assert "Available prompts (3)" in handlers.call_tool(GET_PROMPT_NAMES)[
        "content"
    ][0]["text"]

    (live / "extra.md").write_text("Extra prompt: $ARGUMENTS", encoding="utf-8")
    (live / "greet.yaml").unlink()
    result = handlers.call_tool(RELOAD_PROMPTS)
    assert result["content"][0]["text"] == "Successfully reloaded 3 prompts."
    assert "extra" in handlers.registry
    with pytest.raises(TemplateNotFoundError):
        handlers.get_prompt("greet", {"who": "x"})


def test_get_registry_uses_settings(
    prompts_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    from src.config import settings

    monkeypatch.setattr(settings, "prompts_dirs", [prompts_dir])
    registry = get_registry()
    assert registry is get_registry()
    assert registry.list_names() == ["fix", "greet", "summarize"]
    with pytest.raises(MissingRequiredArgumentError):
        registry.render("summarize", {"style": "terse"})
