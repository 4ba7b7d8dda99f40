from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class UploadedImage:
    """Temporary on-disk copy of an uploaded image.

    Attributes:
        path: Location of the file inside the upload directory.
        original_filename: Filename supplied by the client.
        content_type: Declared media type (e.g. image/png).
    """

    path: Path
    original_filename: str
    content_type: str

    @property
    def filename(self) -> str:
        return self.path.name
