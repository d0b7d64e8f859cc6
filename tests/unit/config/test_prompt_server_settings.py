"""Tests for prompt server settings: defaults, env mapping and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from src.config.settings import LoggingConfig, PromptServerSettings

pytestmark = pytest.mark.unit

_ENV_VARS = (
    "PROMPTS_DIRS",
    "PROMPT_SERVER_PROMPTS_DIRS",
    "PROMPT_SERVER_DEBUG",
    "PROMPT_SERVER_STRICT_REFERENCES",
    "PROMPT_SERVER_LOGGING__LEVEL",
    "PROMPT_SERVER_LOGGING__FILE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = PromptServerSettings(_env_file=None)  # type: ignore[call-arg]
    assert s.prompts_dirs == [Path("./prompts")]
    assert s.strict_references is True
    assert s.debug is False
    assert s.log_level == "INFO"
    assert s.logging.file is None


def test_prompts_dirs_from_comma_separated_env(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("PROMPTS_DIRS", "a, b ,,c")
    s = PromptServerSettings(_env_file=None)  # type: ignore[call-arg]
    assert s.prompts_dirs == [Path("a"), Path("b"), Path("c")]


def test_prefixed_prompts_dirs_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PROMPT_SERVER_PROMPTS_DIRS", "/srv/prompts")
    s = PromptServerSettings(_env_file=None)  # type: ignore[call-arg]
    assert s.prompts_dirs == [Path("/srv/prompts")]


def test_nested_logging_env_and_debug(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PROMPT_SERVER_LOGGING__LEVEL", "warning")
    monkeypatch.setenv("PROMPT_SERVER_STRICT_REFERENCES", "false")
    s = PromptServerSettings(_env_file=None)  # type: ignore[call-arg]
    assert s.logging.level == "WARNING"
    assert s.log_level == "WARNING"
    assert s.strict_references is False

    monkeypatch.setenv("PROMPT_SERVER_DEBUG", "true")
    s = PromptServerSettings(_env_file=None)  # type: ignore[call-arg]
    assert s.log_level == "DEBUG"


def test_dotenv_file_is_read(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("PROMPT_SERVER_DEBUG=true\n", encoding="utf-8")
    s = PromptServerSettings(_env_file=env_file)  # type: ignore[call-arg]
    assert s.debug is True


def test_init_kwargs_override_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PROMPTS_DIRS", "from-env")
    s = PromptServerSettings(  # type: ignore[call-arg]
        _env_file=None, prompts_dirs=[Path("from-init")]
    )
    assert s.prompts_dirs == [Path("from-init")]


def test_invalid_log_level_rejected() -> None:
    with pytest.raises(ValidationError, match="Unsupported log level"):
        LoggingConfig(level="LOUD")
