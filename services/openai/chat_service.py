"""Chat completion helper built on OpenAI's chat completions API."""

import logging
from typing import Dict, List

from openai import AsyncOpenAI

from services.openai.response_utils import extract_message_text, extract_usage

LOGGER = logging.getLogger(__name__)
DEFAULT_MODEL = "gpt-4o-mini"


class ChatCompletionService:
    """Send a full conversation transcript and return the assistant reply."""

    def __init__(self, client: AsyncOpenAI, model: str = DEFAULT_MODEL) -> None:
        """Initialize the service with a shared OpenAI client."""
        if client is None:
            raise ValueError("OpenAI client is required for chat completions.")
        self.client = client
        self.model = model

    async def complete(self, messages: List[Dict[str, str]]) -> str:
        """Return the assistant's reply to `messages`."""
        if not messages:
            raise ValueError("At least one message is required.")

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
            )
        except Exception as exc:
            LOGGER.error("OpenAI chat completion request failed: %s", exc)
            raise

        reply = extract_message_text(response)
        LOGGER.info("Chat completion usage: %s", extract_usage(response))
        return reply
