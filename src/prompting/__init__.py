"""Prompting public API.

File-based prompt templates rendered with a small set of ordered strategies
(``$ARGUMENTS`` substitution, then Handlebars), plus argument validation and
an atomically reloadable registry.
"""

from .errors import (
    MissingRequiredArgumentError,
    NoApplicableStrategyError,
    PromptLoadError,
    PromptServerError,
    RenderError,
    TemplateNotFoundError,
)
from .loader import load_templates
from .models import (
    ArgumentPresence,
    PromptArgument,
    PromptInfo,
    PromptMessage,
    PromptResponse,
    PromptTemplate,
    RenderedMessage,
    ValidationResult,
)
from .registry import PromptEntry, PromptRegistry, get_registry
from .renderer import normalize_role, process_template
from .schema import build_argument_schema
from .strategies import select_strategy
from .validators import validate_template

__all__ = [
    "ArgumentPresence",
    "MissingRequiredArgumentError",
    "NoApplicableStrategyError",
    "PromptArgument",
    "PromptEntry",
    "PromptInfo",
    "PromptLoadError",
    "PromptMessage",
    "PromptRegistry",
    "PromptResponse",
    "PromptServerError",
    "PromptTemplate",
    "RenderError",
    "RenderedMessage",
    "TemplateNotFoundError",
    "ValidationResult",
    "build_argument_schema",
    "get_registry",
    "load_templates",
    "normalize_role",
    "process_template",
    "select_strategy",
    "validate_template",
]
