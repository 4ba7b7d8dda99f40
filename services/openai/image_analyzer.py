"""Image description via a vision-capable chat completion model."""

import base64
import logging
from typing import Any, Dict, List

from openai import AsyncOpenAI

from services.openai.response_utils import extract_message_text

LOGGER = logging.getLogger(__name__)
DEFAULT_MODEL = "gpt-4o-mini"
SYSTEM_PROMPT = "You are an AI assistant that can analyze images and answer questions about them."
USER_PROMPT = "Analyze this image."


class ImageAnalysisService:
    """Ask the model to describe an uploaded image."""

    def __init__(self, client: AsyncOpenAI, model: str = DEFAULT_MODEL) -> None:
        if client is None:
            raise ValueError("OpenAI client must be provided.")
        self.client = client
        self.model = model

    def _encode_image(self, image_bytes: bytes, mime_type: str) -> str:
        """Encode image bytes to a base64 data URL string."""
        encoded = base64.b64encode(image_bytes).decode("utf-8")
        return f"data:{mime_type};base64,{encoded}"

    def _build_messages(self, image_url: str) -> List[Dict[str, Any]]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": USER_PROMPT},
                    {"type": "image_url", "image_url": {"url": image_url}},
                ],
            },
        ]

    async def describe(self, image_bytes: bytes, mime_type: str = "image/jpeg") -> str:
        """Return the model's textual description of the image.

        Args:
            image_bytes: Raw bytes of the uploaded image.
            mime_type: Media type used for the data URL.

        Raises:
            ValueError: If no image bytes are given.
        """
        if not image_bytes:
            raise ValueError("Image content is required for analysis.")

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=self._build_messages(self._encode_image(image_bytes, mime_type)),
            )
        except Exception as exc:
            LOGGER.error("OpenAI image analysis request failed: %s", exc)
            raise

        return extract_message_text(response)
