"""Temporary on-disk storage for uploaded images.

Uploads are written under the configured upload directory with a generated
name (`<epoch millis>-<random hex><extension>`) and removed again when the
`temporary_upload` scope exits, whether the enclosed work succeeded or not.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import aiofiles
import aiofiles.os

from models.upload_models import UploadedImage
from utils.media_validation import image_extension

LOGGER = logging.getLogger(__name__)


class UploadStore:
    """Write uploads to a directory and guarantee their cleanup."""

    def __init__(self, upload_dir: str | Path) -> None:
        self.upload_dir = Path(upload_dir)

    def ensure_directory(self) -> Path:
        """Create the upload directory if needed and return it."""
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        return self.upload_dir

    def generate_filename(self, original_filename: str) -> str:
        """Return a unique name that keeps the original extension."""
        millis = int(time.time() * 1000)
        return f"{millis}-{uuid.uuid4().hex[:8]}{image_extension(original_filename)}"

    async def save(self, data: bytes, original_filename: str, content_type: str) -> UploadedImage:
        """Persist `data` under a generated name."""
        self.ensure_directory()
        path = self.upload_dir / self.generate_filename(original_filename)
        async with aiofiles.open(path, "wb") as f:
            await f.write(data)
        return UploadedImage(path=path, original_filename=original_filename, content_type=content_type)

    async def read(self, image: UploadedImage) -> bytes:
        async with aiofiles.open(image.path, "rb") as f:
            return await f.read()

    async def delete(self, image: UploadedImage) -> None:
        """Remove the file; failures are logged and swallowed."""
        try:
            await aiofiles.os.remove(image.path)
        except OSError as exc:
            LOGGER.warning("Error deleting uploaded file %s: %s", image.path, exc)

    @asynccontextmanager
    async def temporary_upload(
        self, data: bytes, original_filename: str, content_type: str
    ) -> AsyncIterator[UploadedImage]:
        """Save an upload for the duration of the `async with` block."""
        image = await self.save(data, original_filename, content_type)
        try:
            yield image
        finally:
            await self.delete(image)
