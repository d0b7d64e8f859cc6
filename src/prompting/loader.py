"""Template loader utilities.

Scans prompt directories for JSON, YAML and Markdown files and returns typed
templates. One bad file never prevents the rest from loading: parse and
structure errors are logged and the file is skipped.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from .errors import PromptLoadError
from .models import PromptTemplate
from .parsers import get_parse_strategy


def load_template_file(path: Path) -> PromptTemplate:
    """Parse and validate a single prompt file.

    Args:
        path: File to load; its extension selects the parser.

    Returns:
        The loaded PromptTemplate.

    Raises:
        PromptLoadError: If the file is unsupported, unreadable or malformed.
    """
    strategy = get_parse_strategy(path)
    if strategy is None:
        raise PromptLoadError(path, f"unsupported extension '{path.suffix}'")
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise PromptLoadError(path, f"unreadable file: {exc}") from exc
    data = strategy.parse(content, path)
    if not isinstance(data, dict):
        raise PromptLoadError(path, "prompt file must contain a mapping")
    try:
        return PromptTemplate.model_validate(data)
    except ValidationError as exc:
        raise PromptLoadError(
            path, f"invalid prompt format ({exc.error_count()} error(s))"
        ) from exc


def _iter_candidate_files(directory: Path) -> list[Path]:
    return sorted(p for p in directory.iterdir() if p.is_file())


def load_templates(directories: Iterable[Path | str]) -> list[PromptTemplate]:
    """Load all templates from the given directories.

    Directories are scanned in order (non-recursively, files sorted by name).
    When two files declare the same template name the first one wins.

    Args:
        directories: Prompt directories to scan.

    Returns:
        Loaded templates in discovery order.
    """
    templates: list[PromptTemplate] = []
    seen: dict[str, Path] = {}
    for raw_dir in directories:
        directory = Path(raw_dir).expanduser()
        if not directory.is_dir():
            logger.warning("Prompt directory not found: {}", directory)
            continue
        for path in _iter_candidate_files(directory):
            if get_parse_strategy(path) is None:
                logger.debug("Ignoring unsupported file {}", path)
                continue
            try:
                template = load_template_file(path)
            except PromptLoadError as exc:
                logger.warning("Skipping prompt file {}: {}", path, exc.reason)
                continue
            if template.name in seen:
                logger.warning(
                    "Duplicate prompt name '{}' in {} (already loaded from {})",
                    template.name,
                    path,
                    seen[template.name],
                )
                continue
            seen[template.name] = path
            templates.append(template)
        logger.info("Loaded prompts from {}", directory)
    logger.info("{} prompt(s) loaded", len(templates))
    return templates


__all__ = ["load_template_file", "load_templates"]
