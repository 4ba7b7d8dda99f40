"""FastAPI route for image upload and analysis."""

from typing import Optional

from fastapi import APIRouter, File, Request, UploadFile

from controllers.upload_controller import upload_and_analyze

router = APIRouter()


@router.post("/upload-image", summary="Upload an image and receive a description")
async def upload_image_route(request: Request, image: Optional[UploadFile] = File(None)):
    """Handle a single JPEG/PNG upload under the multipart field `image`.

    Returns:
        `{"message": ..., "description": ...}` once the model described the image.
    """
    return await upload_and_analyze(request, image)
