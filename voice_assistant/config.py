"""Runtime settings read from environment variables."""

import os
from dataclasses import dataclass

from voice_assistant.constants import (
    CHAT_MODEL,
    TRANSCRIBE_MODEL,
    DEFAULT_HOST,
    DEFAULT_PORT,
    FALLBACK_LOCALE,
    MAX_RECORDING_SECONDS,
)


def _env_int(name: str, default: int) -> int:
    val = os.environ.get(name)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    val = os.environ.get(name)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        return default


@dataclass
class Settings:
    openai_api_key: str | None = None
    chat_model: str = CHAT_MODEL
    transcribe_model: str = TRANSCRIBE_MODEL
    max_recording_seconds: float = MAX_RECORDING_SECONDS
    fallback_locale: str = FALLBACK_LOCALE
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


def load_settings() -> Settings:
    """Build Settings from the environment, falling back to constants."""
    d = Settings()
    return Settings(
        openai_api_key=os.environ.get("OPENAI_API_KEY") or None,
        chat_model=os.environ.get("VOICE_ASSISTANT_CHAT_MODEL", d.chat_model),
        transcribe_model=os.environ.get("VOICE_ASSISTANT_TRANSCRIBE_MODEL", d.transcribe_model),
        max_recording_seconds=_env_float("VOICE_ASSISTANT_MAX_RECORDING_SECONDS", d.max_recording_seconds),
        fallback_locale=os.environ.get("VOICE_ASSISTANT_FALLBACK_LOCALE") or d.fallback_locale,
        host=os.environ.get("VOICE_ASSISTANT_HOST", d.host),
        port=_env_int("VOICE_ASSISTANT_PORT", d.port),
    )
