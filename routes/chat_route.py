"""FastAPI route for the conversational relay."""

from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from controllers.chat_controller import chat
from utils.errors import ServerError

router = APIRouter(prefix="/api")


class ChatPayload(BaseModel):
	user_id: Optional[str] = Field(None, alias="userId")
	message: Optional[str] = None


@router.post("/chat")
async def chat_route(request: Request, payload: ChatPayload):
	try:
		return await chat(request, payload.user_id, payload.message)
	except ServerError as exc:
		# This endpoint answers server failures in plain text.
		return PlainTextResponse(exc.message, status_code=exc.status_code)
