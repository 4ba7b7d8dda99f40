"""Chat domain models for the conversational relay."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List

ROLES = ("user", "assistant", "system")


@dataclass(frozen=True)
class ChatMessage:
	"""Single role-tagged message; immutable once created."""

	role: str
	content: str

	def __post_init__(self) -> None:
		if self.role not in ROLES:
			raise ValueError(f"Unsupported chat role: {self.role!r}")

	def as_payload(self) -> Dict[str, str]:
		"""Return the dict shape expected by chat completion APIs."""
		return {"role": self.role, "content": self.content}


@dataclass
class ChatTranscript:
	"""Append-only, ordered conversation for one user."""

	user_id: str
	messages: List[ChatMessage] = field(default_factory=list)

	def append(self, message: ChatMessage) -> None:
		self.messages.append(message)

	def as_payload(self) -> List[Dict[str, str]]:
		"""Snapshot of the transcript as provider-ready message dicts."""
		return [msg.as_payload() for msg in self.messages]

	def __len__(self) -> int:
		return len(self.messages)

	def __iter__(self) -> Iterator[ChatMessage]:
		return iter(self.messages)
