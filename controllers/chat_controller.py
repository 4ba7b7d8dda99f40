"""Conversational relay backed by the per-user session store."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Request

from services.chat.session_store import ChatSessionStore
from services.openai.chat_service import ChatCompletionService
from utils.errors import InvalidRequestError, ServerError

LOGGER = logging.getLogger(__name__)


async def chat(request: Request, user_id: Optional[str], message: Optional[str]) -> Dict[str, Any]:
	"""Append the user message, complete the whole transcript, store and return the reply.

	The user message stays in the transcript when the completion call fails.
	"""
	if not user_id or not message:
		raise InvalidRequestError("User ID and message are required.")

	store: ChatSessionStore = request.app.state.session_store
	service = ChatCompletionService(request.app.state.openai_client, model=request.app.state.settings.openai_model)

	session = store.session(user_id)
	async with session.lock:
		session.append("user", message)
		try:
			reply = await service.complete(session.transcript.as_payload())
		except Exception as exc:
			LOGGER.error("Chat relay failed for user %s: %s", user_id, exc)
			raise ServerError("A server error occurred.") from exc
		finally:
			# The entry may have been evicted while the provider call was pending.
			store.put(session)
		session.append("assistant", reply)

	return {"response": reply}
