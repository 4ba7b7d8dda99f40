"""Upload handling: validate, store temporarily, describe, clean up."""

import logging
from typing import Any, Dict, Optional

from fastapi import Request, UploadFile

from services.openai.image_analyzer import ImageAnalysisService
from services.upload_store import UploadStore
from utils.errors import InvalidRequestError, ServerError
from utils.media_validation import normalize_content_type, validate_image_upload

LOGGER = logging.getLogger(__name__)
SUCCESS_MESSAGE = "Image uploaded and analyzed successfully."


async def upload_and_analyze(request: Request, image: Optional[UploadFile]) -> Dict[str, Any]:
    """Validate the upload, ask the model for a description, and delete the temp file.

    Nothing is written to disk when validation fails. Once written, the file
    is removed on every exit path.
    """
    image = validate_image_upload(image)
    data = await image.read()
    if not data:
        raise InvalidRequestError("Uploaded image is empty.")

    content_type = normalize_content_type(image.content_type)
    store: UploadStore = request.app.state.upload_store
    analyzer = ImageAnalysisService(request.app.state.openai_client, model=request.app.state.settings.openai_model)

    async with store.temporary_upload(data, image.filename, content_type) as stored:
        try:
            stored_bytes = await store.read(stored)
            description = await analyzer.describe(stored_bytes, stored.content_type)
        except Exception as exc:
            LOGGER.error("Error analyzing image %s: %s", stored.filename, exc)
            raise ServerError("Failed to analyze image.") from exc

    return {"message": SUCCESS_MESSAGE, "description": description}
