"""Text-to-image generation through Stability AI's stable-image REST API."""

import base64
import json
import logging
from typing import Any

import httpx

from utils.settings import DEFAULT_STABILITY_URL

LOGGER = logging.getLogger(__name__)
OUTPUT_FORMAT = "jpeg"
UNKNOWN_PROVIDER_ERROR = "Unknown error occurred."


class StabilityAPIError(Exception):
    """Raised when Stability answers with a non-200 status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Stability request failed with status {status_code}: {message}")
        self.status_code = status_code
        self.message = message


def to_data_uri(image_bytes: bytes, mime_type: str = "image/jpeg") -> str:
    """Encode raw image bytes as a base64 data URI."""
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def extract_error_message(body: bytes) -> str:
    """Return the first entry of the provider's `errors` array, or a generic message."""
    try:
        payload: Any = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return UNKNOWN_PROVIDER_ERROR
    if not isinstance(payload, dict):
        return UNKNOWN_PROVIDER_ERROR
    errors = payload.get("errors")
    if not isinstance(errors, list) or not errors or not errors[0]:
        return UNKNOWN_PROVIDER_ERROR
    return str(errors[0])


class StabilityImageGenerator:
    """Submit prompts to Stability and return JPEG data URIs."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        url: str = DEFAULT_STABILITY_URL,
    ) -> None:
        """Initialize the generator with a shared async HTTP client.

        Args:
            http_client: Client owned by the application lifespan.
            api_key: Stability bearer credential.
            url: Generation endpoint accepting multipart form data.
        """
        if http_client is None:
            raise ValueError("An httpx.AsyncClient must be provided.")
        if not api_key:
            raise ValueError("Stability API key is required.")
        self.http_client = http_client
        self.api_key = api_key
        self.url = url

    async def generate(self, prompt: str) -> str:
        """Generate an image for `prompt`.

        Returns:
            A `data:image/jpeg;base64,...` string.

        Raises:
            ValueError: If the prompt is empty.
            StabilityAPIError: If the provider returns a non-200 status.
            httpx.HTTPError: On transport failures.
        """
        if not prompt or not prompt.strip():
            raise ValueError("Prompt must not be empty.")

        # Tuples with a None filename render as plain multipart form fields.
        form = {
            "prompt": (None, prompt),
            "output_format": (None, OUTPUT_FORMAT),
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "image/*",
        }
        response = await self.http_client.post(self.url, files=form, headers=headers)

        if response.status_code != 200:
            message = extract_error_message(response.content)
            LOGGER.warning("Stability returned status %s: %s", response.status_code, message)
            raise StabilityAPIError(response.status_code, message)

        LOGGER.info("Stability image received (%d bytes)", len(response.content))
        return to_data_uri(response.content, f"image/{OUTPUT_FORMAT}")
