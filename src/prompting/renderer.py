"""Template processor: turns a template plus arguments into rendered messages.

Messages are rendered in declaration order. Empty bodies are skipped with a
warning; any rendering failure propagates and aborts the whole call. Callers
must run :func:`src.prompting.validators.validate_template` first; this module
does not re-check arguments.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from loguru import logger

from .models import (
    MessageRole,
    PromptMessage,
    PromptResponse,
    PromptTemplate,
    ProtocolRole,
    RenderedMessage,
    TextContent,
)
from .strategies import DEFAULT_STRATEGIES, TemplateStrategy, select_strategy


def normalize_role(role: MessageRole) -> ProtocolRole:
    """Collapse the three-role template model onto the two-role protocol."""
    return "user" if role == "system" else role


def render_message(
    message: PromptMessage,
    args: Mapping[str, Any],
    strategies: Sequence[TemplateStrategy] = DEFAULT_STRATEGIES,
) -> RenderedMessage:
    """Render a single message body with the first applicable strategy."""
    body = message.content.text
    strategy = select_strategy(body, strategies)
    try:
        text = strategy.render(body, args)
    except Exception as exc:
        logger.error("Message rendering failed [role={}]: {}", message.role, exc)
        raise
    return RenderedMessage(
        role=normalize_role(message.role), content=TextContent(text=text)
    )


def process_template(
    template: PromptTemplate,
    args: Mapping[str, Any] | None = None,
    strategies: Sequence[TemplateStrategy] = DEFAULT_STRATEGIES,
) -> PromptResponse:
    """Render every message of ``template`` against ``args``.

    Args:
        template: Validated prompt template.
        args: Caller-supplied argument map.
        strategies: Ordered rendering strategies; first match wins.

    Returns:
        PromptResponse with the template description (or ``"Prompt: <name>"``)
        and the rendered, role-normalized messages.

    Raises:
        RenderError: If a strategy fails to render a body.
        NoApplicableStrategyError: If no strategy accepts a body.
    """
    args = args or {}
    logger.info("Processing prompt template '{}'", template.name)

    rendered: list[RenderedMessage] = []
    for index, message in enumerate(template.messages):
        if not message.content.text:
            logger.warning(
                "Skipping empty message {} of '{}'", index, template.name
            )
            continue
        rendered.append(render_message(message, args, strategies))

    logger.info(
        "Processed '{}': {} of {} messages rendered",
        template.name,
        len(rendered),
        len(template.messages),
    )
    return PromptResponse(
        description=template.description or f"Prompt: {template.name}",
        messages=tuple(rendered),
    )


__all__ = ["normalize_role", "process_template", "render_message"]
