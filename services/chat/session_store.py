"""In-memory store for per-user chat transcripts."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from cachetools import TTLCache

from models.chat_models import ChatMessage, ChatTranscript


@dataclass
class ChatSession:
	"""A user's transcript together with the lock guarding its exchanges."""

	transcript: ChatTranscript
	lock: asyncio.Lock = field(default_factory=asyncio.Lock)

	@property
	def user_id(self) -> str:
		return self.transcript.user_id

	def append(self, role: str, content: str) -> None:
		self.transcript.append(ChatMessage(role=role, content=content))


class ChatSessionStore:
	"""Map user ids to conversation sessions.

	Unknown ids get an empty transcript on first access. Entries are bounded by
	`max_sessions` (least recently used evicted first) and expire after
	`ttl_seconds` without activity.
	"""

	def __init__(
		self,
		max_sessions: int = 10_000,
		ttl_seconds: float = 86_400.0,
		timer: Optional[Callable[[], float]] = None,
	) -> None:
		if max_sessions <= 0:
			raise ValueError("max_sessions must be positive.")
		if ttl_seconds <= 0:
			raise ValueError("ttl_seconds must be positive.")
		self._sessions: TTLCache = TTLCache(
			maxsize=max_sessions, ttl=ttl_seconds, timer=timer or time.monotonic
		)

	def session(self, user_id: str) -> ChatSession:
		"""Return the session for `user_id`, creating an empty one if absent.

		Callers holding the returned object across awaits should hand it back
		with `put` so an eviction in between does not split the transcript.
		"""
		session = self._sessions.get(user_id)
		if session is None:
			session = ChatSession(transcript=ChatTranscript(user_id=user_id))
		self.put(session)
		return session

	def put(self, session: ChatSession) -> None:
		"""Store `session` under its user id, refreshing its TTL and LRU position."""
		self._sessions[session.user_id] = session

	def get(self, user_id: str) -> ChatTranscript:
		"""Return the transcript for `user_id`, creating an empty one if absent."""
		return self.session(user_id).transcript

	def append(self, user_id: str, role: str, content: str) -> None:
		"""Append a message to the user's transcript."""
		self.session(user_id).append(role, content)

	def lock(self, user_id: str) -> asyncio.Lock:
		"""Per-user lock used to keep a user/assistant exchange contiguous."""
		return self.session(user_id).lock

	def clear(self) -> None:
		self._sessions.clear()

	def __contains__(self, user_id: object) -> bool:
		return user_id in self._sessions

	def __len__(self) -> int:
		self._sessions.expire()
		return len(self._sessions)
