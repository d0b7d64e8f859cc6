"""Transport-agnostic handlers for prompt requests and management tools.

Each handler returns the plain payload a protocol layer would send back:
prompt listings, rendered prompts, and tool results shaped as
``{"content": [{"type": "text", "text": ...}], "isError": bool}``. Lookup
misses and reload failures become error tool results rather than exceptions;
argument and rendering errors on prompt requests propagate to the transport,
which turns them into protocol-level errors.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from loguru import logger

from src.prompting.errors import PromptServerError, TemplateNotFoundError
from src.prompting.registry import PromptRegistry
from src.utils.monitoring import log_error_with_context

RELOAD_PROMPTS = "reload_prompts"
GET_PROMPT_NAMES = "get_prompt_names"
GET_PROMPT_INFO = "get_prompt_info"

TOOL_DESCRIPTIONS: Mapping[str, str] = {
    RELOAD_PROMPTS: "Reload all prompt templates",
    GET_PROMPT_NAMES: "Get list of all available prompt names",
    GET_PROMPT_INFO: "Get detailed information about a specific prompt",
}


def text_result(text: str, *, is_error: bool = False) -> dict[str, Any]:
    """Wrap ``text`` in a tool result payload."""
    return {"content": [{"type": "text", "text": text}], "isError": is_error}


class PromptHandlers:
    """Binds a :class:`PromptRegistry` to request handlers."""

    def __init__(self, registry: PromptRegistry) -> None:
        self.registry = registry

    def list_prompts(self) -> list[dict[str, Any]]:
        """Describe every loaded prompt and its argument schema."""
        prompts: list[dict[str, Any]] = []
        for entry in self.registry.snapshot().entries.values():
            template = entry.template
            prompts.append(
                {
                    "name": template.name,
                    "description": template.description
                    or f"Prompt: {template.name}",
                    "arguments": [
                        {
                            "name": arg.name,
                            "description": arg.description,
                            "required": arg.required,
                        }
                        for arg in template.arguments
                    ],
                }
            )
        return prompts

    def get_prompt(
        self, name: str, arguments: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Render ``name`` and return the prompt response payload.

        Raises:
            TemplateNotFoundError: If ``name`` is not loaded.
            MissingRequiredArgumentError: If argument validation fails.
            RenderError: If a message body fails to render.
        """
        try:
            response = self.registry.render(name, arguments)
        except PromptServerError as exc:
            log_error_with_context(exc, "prompts.get", prompt=name)
            raise
        return response.model_dump(mode="json")

    def reload_prompts(self) -> dict[str, Any]:
        try:
            count = self.registry.reload()
        except Exception as exc:
            log_error_with_context(exc, "prompts.reload")
            return text_result(f"Failed to reload prompts: {exc}", is_error=True)
        return text_result(f"Successfully reloaded {count} prompts.")

    def get_prompt_names(self) -> dict[str, Any]:
        names = self.registry.list_names()
        return text_result(f"Available prompts ({len(names)}):\n" + "\n".join(names))

    def get_prompt_info(self, name: str) -> dict[str, Any]:
        try:
            info = self.registry.get_info(name)
        except TemplateNotFoundError as exc:
            logger.warning("Prompt info requested for unknown prompt '{}'", name)
            return text_result(str(exc), is_error=True)

        lines = [
            f"Name: {info.name}",
            f"Description: {info.description}",
            f"Argument count: {info.argument_count}",
            f"Message count: {info.message_count}",
        ]
        if info.arguments:
            lines.append("\nArguments:")
            lines.extend(
                f"  - {arg.name}: {arg.description} "
                f"({'required' if arg.required else 'optional'})"
                for arg in info.arguments
            )
        return text_result("\n".join(lines))

    def call_tool(
        self, tool: str, arguments: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Dispatch a management tool call by name."""
        arguments = arguments or {}
        if tool == RELOAD_PROMPTS:
            return self.reload_prompts()
        if tool == GET_PROMPT_NAMES:
            return self.get_prompt_names()
        if tool == GET_PROMPT_INFO:
            name = arguments.get("name")
            if not isinstance(name, str) or not name:
                return text_result("Missing required argument: name", is_error=True)
            return self.get_prompt_info(name)
        return text_result(f"Unknown tool '{tool}'", is_error=True)


__all__ = [
    "GET_PROMPT_INFO",
    "GET_PROMPT_NAMES",
    "RELOAD_PROMPTS",
    "TOOL_DESCRIPTIONS",
    "PromptHandlers",
    "text_result",
]
