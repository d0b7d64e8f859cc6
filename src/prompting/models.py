"""Prompt template models.

Defines Pydantic models for prompt templates loaded from disk and for the
rendered output handed to the transport layer. Templates are frozen once
constructed; a reload replaces them wholesale instead of mutating them.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)

MessageRole = Literal["user", "assistant", "system"]
ProtocolRole = Literal["user", "assistant"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class PromptArgument(_Frozen):
    """A declared template parameter.

    Attributes:
        name: Argument name, unique within its template.
        description: Human-readable description shown to callers.
        required: Whether callers must supply a value.
    """

    name: str = Field(min_length=1, description="Argument name")
    description: str = Field(default="", description="Argument description")
    required: bool = Field(default=False, description="Required flag")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Argument name must not be blank")
        return value


class TextContent(_Frozen):
    """Text payload of a message; ``text`` may hold template syntax."""

    type: Literal["text"] = "text"
    text: str = ""


class PromptMessage(_Frozen):
    """A role-tagged message body as declared in a template file."""

    role: MessageRole
    content: TextContent


class PromptTemplate(_Frozen):
    """Complete prompt template: metadata, arguments and message bodies."""

    name: str = Field(min_length=1, description="Unique template name")
    description: str = Field(default="", description="Template description")
    arguments: tuple[PromptArgument, ...] = Field(default=())
    messages: tuple[PromptMessage, ...] = Field(default=())

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Template name must not be blank")
        return value

    @field_validator("arguments", mode="before")
    @classmethod
    def _none_arguments(cls, value: object) -> object:
        return () if value is None else value

    @field_validator("arguments")
    @classmethod
    def _unique_arguments(
        cls, value: tuple[PromptArgument, ...]
    ) -> tuple[PromptArgument, ...]:
        seen: set[str] = set()
        for arg in value:
            if arg.name in seen:
                raise ValueError(f"Duplicate argument name '{arg.name}'")
            seen.add(arg.name)
        return value


class RenderedMessage(_Frozen):
    """Externally visible message; ``system`` has been collapsed to ``user``."""

    role: ProtocolRole
    content: TextContent


class PromptResponse(_Frozen):
    """Result of rendering a template against an argument map."""

    description: str
    messages: tuple[RenderedMessage, ...] = ()


class ValidationResult(_Frozen):
    """Outcome of validating an argument map against a template."""

    missing_args: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        return not self.missing_args and not self.errors


class ArgumentPresence(str, Enum):
    """Required/optional marker used by boundary-level input validation."""

    REQUIRED = "required"
    OPTIONAL = "optional"


class PromptInfo(_Frozen):
    """Management view of a loaded template."""

    name: str
    description: str
    argument_count: int
    message_count: int
    arguments: tuple[PromptArgument, ...] = ()


__all__ = [
    "ArgumentPresence",
    "MessageRole",
    "PromptArgument",
    "PromptInfo",
    "PromptMessage",
    "PromptResponse",
    "PromptTemplate",
    "ProtocolRole",
    "RenderedMessage",
    "TextContent",
    "ValidationResult",
]
