"""Environment-backed configuration for the relay service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv

DEFAULT_CORS_ORIGIN = "https://serverbudxeedev.up.railway.app"
DEFAULT_STABILITY_URL = "https://api.stability.ai/v2beta/stable-image/generate/core"


@dataclass
class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here.
    """

    stability_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    port: int = 4000
    cors_origin: str = DEFAULT_CORS_ORIGIN
    upload_dir: str = "uploads"
    openai_model: str = "gpt-4o-mini"
    stability_api_url: str = DEFAULT_STABILITY_URL
    stability_timeout_seconds: float = 60.0
    chat_max_sessions: int = 10_000
    chat_session_ttl_seconds: float = 86_400.0
    log_level: str = "INFO"

    def missing_credentials(self) -> List[str]:
        """Return the names of required credentials that are not set."""
        missing = []
        if not self.stability_api_key:
            missing.append("STABILITY_API_KEY")
        if not self.openai_api_key:
            missing.append("OPENAI_API_KEY")
        return missing


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def load_settings() -> Settings:
    """Build `Settings` from the process environment (and a `.env` file if present)."""
    load_dotenv()
    return Settings(
        stability_api_key=os.getenv("STABILITY_API_KEY") or None,
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        port=_int_env("PORT", 4000),
        cors_origin=os.getenv("CORS_ORIGIN", DEFAULT_CORS_ORIGIN),
        upload_dir=os.getenv("UPLOAD_DIR", "uploads"),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        stability_api_url=os.getenv("STABILITY_API_URL", DEFAULT_STABILITY_URL),
        stability_timeout_seconds=_float_env("STABILITY_TIMEOUT_SECONDS", 60.0),
        chat_max_sessions=_int_env("CHAT_MAX_SESSIONS", 10_000),
        chat_session_ttl_seconds=_float_env("CHAT_SESSION_TTL_SECONDS", 86_400.0),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
