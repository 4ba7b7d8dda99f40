"""Image generation relay."""

import logging
from typing import Any, Dict, Optional

import httpx
from fastapi import Request

from services.stability.image_generator import StabilityAPIError, StabilityImageGenerator
from utils.errors import InvalidRequestError, ProviderError, ServerError

LOGGER = logging.getLogger(__name__)


async def generate_image(request: Request, prompt: Optional[str]) -> Dict[str, Any]:
    """Relay a prompt to the image provider and return the image as a data URI.

    Args:
        request: FastAPI Request object (used to access app.state for shared clients).
        prompt: Text prompt from the client.

    Returns:
        A dict containing `image`, a `data:image/jpeg;base64,...` string.

    Raises:
        InvalidRequestError: If the prompt is missing or blank.
        ProviderError: If the provider answered with an error status.
        ServerError: On transport failures or unexpected errors.
    """
    if not prompt or not prompt.strip():
        raise InvalidRequestError("Prompt must not be empty.")

    generator: StabilityImageGenerator = request.app.state.image_generator
    try:
        image = await generator.generate(prompt)
    except StabilityAPIError as exc:
        raise ProviderError(exc.message, status_code=exc.status_code) from exc
    except httpx.HTTPError as exc:
        LOGGER.error("Image provider request failed: %s", exc)
        raise ServerError("A server error occurred.") from exc
    except Exception as exc:
        LOGGER.exception("Unexpected error while generating image")
        raise ServerError("A server error occurred.") from exc

    return {"image": image}
