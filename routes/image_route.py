from typing import Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from controllers.image_controller import generate_image

router = APIRouter()


class GenerateImagePayload(BaseModel):
    prompt: Optional[str] = None


@router.post("/generate-image")
async def generate_image_route(request: Request, payload: GenerateImagePayload):
    """Return `{"image": <data URI>}` for the given prompt."""
    return await generate_image(request, payload.prompt)
