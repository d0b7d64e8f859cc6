"""Protocol-neutral request handlers for the prompt server."""

from .handlers import PromptHandlers, text_result

__all__ = ["PromptHandlers", "text_result"]
