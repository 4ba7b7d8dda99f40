"""Validation helpers for uploaded image files."""

import os
from typing import Optional

from fastapi import UploadFile

from utils.errors import InvalidRequestError

ALLOWED_IMAGE_EXTENSIONS = {".jpeg", ".jpg", ".png"}
ALLOWED_IMAGE_SUBTYPES = {"jpeg", "jpg", "png"}
INVALID_TYPE_MESSAGE = "Only image files (JPEG/PNG) are allowed."


def image_extension(filename: Optional[str]) -> str:
    """Return the lower-cased extension of `filename` including the dot."""
    return os.path.splitext(filename or "")[1].lower()


def normalize_content_type(content_type: Optional[str]) -> str:
    """Strip parameters and whitespace from a media type (e.g. `image/png; q=1`)."""
    if not content_type:
        return ""
    return content_type.lower().split(";", 1)[0].strip()


def is_allowed_image(filename: Optional[str], content_type: Optional[str]) -> bool:
    """Both the extension and the declared media type must name JPEG or PNG."""
    if image_extension(filename) not in ALLOWED_IMAGE_EXTENSIONS:
        return False
    media_type = normalize_content_type(content_type)
    if "/" not in media_type:
        return False
    major, subtype = media_type.split("/", 1)
    return major == "image" and subtype in ALLOWED_IMAGE_SUBTYPES


def validate_image_upload(image: Optional[UploadFile]) -> UploadFile:
    """Return the upload when it is an accepted image, otherwise raise.

    Raises:
        InvalidRequestError: If no file was sent or its type is not allowed.
    """
    if image is None or not image.filename:
        raise InvalidRequestError("No image was uploaded.")
    if not is_allowed_image(image.filename, image.content_type):
        raise InvalidRequestError(INVALID_TYPE_MESSAGE)
    return image
