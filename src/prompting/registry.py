"""Template registry and public API.

Owns the in-memory collection of loaded templates. The collection is an
immutable :class:`PromptCatalog` snapshot; :meth:`PromptRegistry.reload`
builds a new catalog from disk and installs it with a single assignment, so a
lookup sees either the old or the new collection, never a mix of both.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

from loguru import logger

from src.utils.monitoring import performance_timer

from .errors import MissingRequiredArgumentError, TemplateNotFoundError
from .loader import load_templates
from .models import ArgumentPresence, PromptInfo, PromptResponse, PromptTemplate
from .renderer import process_template
from .schema import build_argument_schema
from .validators import validate_template

TemplateLoader = Callable[[Sequence[Path]], Iterable[PromptTemplate]]


@dataclass(frozen=True, slots=True)
class PromptEntry:
    """Render entry point derived from one template."""

    template: PromptTemplate
    schema: Mapping[str, ArgumentPresence] | None
    strict_references: bool = True

    @classmethod
    def from_template(
        cls, template: PromptTemplate, *, strict_references: bool = True
    ) -> PromptEntry:
        schema = build_argument_schema(template)
        return cls(
            template=template,
            schema=MappingProxyType(schema) if schema is not None else None,
            strict_references=strict_references,
        )

    @property
    def name(self) -> str:
        return self.template.name

    def render(self, args: Mapping[str, Any] | None = None) -> PromptResponse:
        """Validate ``args`` and render the template.

        Raises:
            MissingRequiredArgumentError: If a required argument is missing,
                or a reference is unbound while ``strict_references`` is set.
            RenderError: If rendering a message body fails.
        """
        args = dict(args or {})
        validation = validate_template(self.template, args)
        if validation.missing_args or (
            validation.errors and self.strict_references
        ):
            raise MissingRequiredArgumentError(
                validation.missing_args,
                validation.errors,
                template_name=self.name,
            )
        for error in validation.errors:
            logger.warning("Rendering '{}' despite: {}", self.name, error)
        return process_template(self.template, args)


@dataclass(frozen=True, slots=True)
class PromptCatalog:
    """Immutable snapshot of the loaded templates keyed by name."""

    entries: Mapping[str, PromptEntry] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def build(
        cls, templates: Iterable[PromptTemplate], *, strict_references: bool = True
    ) -> PromptCatalog:
        entries: dict[str, PromptEntry] = {}
        for template in templates:
            if template.name in entries:
                logger.warning("Ignoring duplicate prompt '{}'", template.name)
                continue
            entries[template.name] = PromptEntry.from_template(
                template, strict_references=strict_references
            )
        return cls(entries=MappingProxyType(entries))

    @property
    def names(self) -> list[str]:
        return list(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, name: str) -> PromptEntry:
        try:
            return self.entries[name]
        except KeyError:
            raise TemplateNotFoundError(name) from None


class PromptRegistry:
    """Holds the current catalog and exposes lookup, render and reload."""

    def __init__(
        self,
        directories: Iterable[Path | str] = (),
        *,
        loader: TemplateLoader = load_templates,
        strict_references: bool = True,
    ) -> None:
        self._directories = tuple(Path(d) for d in directories)
        self._loader = loader
        self._strict_references = strict_references
        self._lock = threading.Lock()
        self._catalog: PromptCatalog | None = None

    @classmethod
    def from_templates(
        cls, templates: Iterable[PromptTemplate], *, strict_references: bool = True
    ) -> PromptRegistry:
        """Build a registry over an in-memory template list."""
        fixed = list(templates)
        return cls(loader=lambda _dirs: fixed, strict_references=strict_references)

    @property
    def directories(self) -> tuple[Path, ...]:
        return self._directories

    def _load_catalog(self) -> PromptCatalog:
        with performance_timer("prompts.reload") as metrics:
            catalog = PromptCatalog.build(
                self._loader(self._directories),
                strict_references=self._strict_references,
            )
            metrics["count"] = len(catalog)
        logger.info("{} prompt(s) registered", len(catalog))
        return catalog

    def reload(self) -> int:
        """Replace the catalog from the loader and return the template count.

        The previous catalog stays installed if loading raises.
        """
        catalog = self._load_catalog()
        with self._lock:
            self._catalog = catalog
        return len(catalog)

    def snapshot(self) -> PromptCatalog:
        """Return the current catalog, loading it on first use."""
        catalog = self._catalog
        if catalog is not None:
            return catalog
        with self._lock:
            # Concurrent first readers wait here; only one of them loads.
            catalog = self._catalog
            if catalog is None:
                catalog = self._load_catalog()
                self._catalog = catalog
        return catalog

    def __len__(self) -> int:
        return len(self.snapshot())

    def __contains__(self, name: object) -> bool:
        return name in self.snapshot().entries

    def list_names(self) -> list[str]:
        """Return loaded template names in discovery order."""
        return self.snapshot().names

    def list_templates(self) -> list[PromptTemplate]:
        return [entry.template for entry in self.snapshot().entries.values()]

    def get_entry(self, name: str) -> PromptEntry:
        """Return the render entry point for ``name``.

        Raises:
            TemplateNotFoundError: If no template has that name.
        """
        return self.snapshot().get(name)

    def get_template(self, name: str) -> PromptTemplate:
        return self.get_entry(name).template

    def get_info(self, name: str) -> PromptInfo:
        """Return management metadata for ``name``."""
        template = self.get_template(name)
        return PromptInfo(
            name=template.name,
            description=template.description,
            argument_count=len(template.arguments),
            message_count=len(template.messages),
            arguments=template.arguments,
        )

    def render(
        self, name: str, args: Mapping[str, Any] | None = None
    ) -> PromptResponse:
        """Look up ``name`` in the current snapshot and render it."""
        return self.get_entry(name).render(args)


@lru_cache(maxsize=1)
def get_registry() -> PromptRegistry:
    """Return the process-wide registry configured from settings."""
    from src.config import settings

    return PromptRegistry(
        settings.prompts_dirs, strict_references=settings.strict_references
    )


__all__ = [
    "PromptCatalog",
    "PromptEntry",
    "PromptRegistry",
    "TemplateLoader",
    "get_registry",
]
