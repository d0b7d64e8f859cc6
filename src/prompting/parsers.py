"""Input adapters that turn prompt files into template data.

A parser is chosen by file extension. JSON and YAML files hold the template
structure directly. Markdown files hold a single user message; their name
comes from the file stem and their description from the first meaningful
line, unless YAML front matter provides them.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, ClassVar

import yaml

from .errors import PromptLoadError
from .strategies import ARGUMENTS_KEY, ARGUMENTS_MARKER

_NUMBERED_PARAM = re.compile(r"\$(\d+)")

_MARKDOWN_CLEANUP: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^#+\s*"), ""),
    (re.compile(r"(\*\*|__)(.*?)\1"), r"\2"),
    (re.compile(r"(\*|_)(.*?)\1"), r"\2"),
    (re.compile(r"`([^`]+)`"), r"\1"),
    (re.compile(r"!\[([^\]]*)\]\([^)]+\)"), r"\1"),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"^\s*[-*+]\s+"), ""),
    (re.compile(r"^\s*\d+\.\s+"), ""),
    (re.compile(r"^>\s*"), ""),
    (re.compile(r"\s+"), " "),
)


def _split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Split YAML front matter from a Markdown body.

    Returns:
        Tuple of (front_matter_dict, body_str). Front matter may be empty.
    """
    if text.startswith("---\n"):
        try:
            _, fm, body = text.split("---\n", 2)
        except ValueError:
            # No closing marker; treat entire file as body
            return {}, text
        data = yaml.safe_load(fm) or {}
        if not isinstance(data, dict):
            return {}, text
        return data, body
    return {}, text


def clean_markdown(line: str) -> str:
    """Strip Markdown formatting from a single line."""
    text = line
    for pattern, repl in _MARKDOWN_CLEANUP:
        text = pattern.sub(repl, text)
    return text.strip()


def extract_description(content: str, fallback: str) -> str:
    """Return the first non-empty line of ``content`` as plain text."""
    for line in content.splitlines():
        cleaned = clean_markdown(line.strip())
        if cleaned:
            return cleaned
    return fallback


def markdown_arguments(content: str) -> list[dict[str, Any]]:
    """Declare optional arguments for ``$ARGUMENTS`` or ``$1``, ``$2``, ..."""
    if ARGUMENTS_MARKER in content:
        return [
            {
                "name": ARGUMENTS_KEY,
                "description": "Arguments for the prompt",
                "required": False,
            }
        ]
    numbers = sorted({m.group(1) for m in _NUMBERED_PARAM.finditer(content)}, key=int)
    return [
        {"name": num, "description": f"Parameter {num}", "required": False}
        for num in numbers
    ]


class ParseStrategy:
    """Base class for file parsers."""

    extensions: ClassVar[tuple[str, ...]] = ()

    def supports(self, path: Path) -> bool:
        return path.suffix.lower() in self.extensions

    def parse(self, content: str, path: Path) -> Any:
        raise NotImplementedError


class JsonParseStrategy(ParseStrategy):
    extensions = (".json",)

    def parse(self, content: str, path: Path) -> Any:
        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            raise PromptLoadError(path, f"invalid JSON: {exc}") from exc


class YamlParseStrategy(ParseStrategy):
    extensions = (".yaml", ".yml")

    def parse(self, content: str, path: Path) -> Any:
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise PromptLoadError(path, f"invalid YAML: {exc}") from exc


class MarkdownParseStrategy(ParseStrategy):
    """Markdown prompt: the whole body becomes one ``user`` message."""

    extensions = (".md", ".markdown")

    def parse(self, content: str, path: Path) -> dict[str, Any]:
        try:
            front_matter, body = _split_front_matter(content)
        except yaml.YAMLError as exc:
            raise PromptLoadError(path, f"invalid front matter: {exc}") from exc
        name = str(front_matter.get("name") or path.stem)
        text = body.strip()
        arguments = front_matter.get("arguments")
        return {
            "name": name,
            "description": str(
                front_matter.get("description") or extract_description(text, name)
            ),
            "arguments": (
                arguments if arguments is not None else markdown_arguments(text)
            ),
            "messages": [{"role": "user", "content": {"type": "text", "text": text}}],
        }


PARSE_STRATEGIES: tuple[ParseStrategy, ...] = (
    JsonParseStrategy(),
    YamlParseStrategy(),
    MarkdownParseStrategy(),
)


def get_parse_strategy(path: Path) -> ParseStrategy | None:
    """Return the parser for ``path`` or ``None`` for unsupported files."""
    return next((s for s in PARSE_STRATEGIES if s.supports(path)), None)


def supported_extensions() -> list[str]:
    return [ext for strategy in PARSE_STRATEGIES for ext in strategy.extensions]


__all__ = [
    "PARSE_STRATEGIES",
    "JsonParseStrategy",
    "MarkdownParseStrategy",
    "ParseStrategy",
    "YamlParseStrategy",
    "clean_markdown",
    "extract_description",
    "get_parse_strategy",
    "markdown_arguments",
    "supported_extensions",
]
