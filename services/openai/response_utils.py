"""Utilities for reading chat completion responses."""

from typing import Any, Dict, Optional


def extract_message_text(response: Any) -> str:
    """Return the content of the first choice's message.

    Raises:
        RuntimeError: If the response carries no choices or no message content.
    """
    choices = getattr(response, "choices", None)
    if not choices:
        raise RuntimeError("Chat completion response contained no choices.")

    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None) if message is not None else None
    if content is None:
        raise RuntimeError("Chat completion response contained no message content.")
    return content


def extract_usage(response: Any) -> Dict[str, Optional[int]]:
    """Return token usage information from the response, if present."""
    usage = getattr(response, "usage", None)
    return {
        "input_tokens": getattr(usage, "prompt_tokens", None) if usage else None,
        "output_tokens": getattr(usage, "completion_tokens", None) if usage else None,
    }
