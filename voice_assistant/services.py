"""Transcription and chat-completion collaborators (OpenAI)."""

import io
import logging
import os

from openai import OpenAI, OpenAIError

from voice_assistant.constants import ASSISTANT_NAME, CHAT_MODEL, FALLBACK_LOCALE, TRANSCRIBE_MODEL
from voice_assistant.language import detect
from voice_assistant.models import Transcription

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """A hosted AI service call failed or could not be made."""


SYSTEM_PROMPT = (
    f'You are an AI voice assistant named "{ASSISTANT_NAME}", trained to help '
    "elderly people in their daily lives. Be kind, patient and respectful. "
    "Keep answers short enough to be read aloud.\n\n"
    "Always respond in the user's spoken language: {language_code}."
)


def build_system_prompt(language_code: str) -> str:
    """Fixed persona prompt conditioned on the detected locale."""
    return SYSTEM_PROMPT.replace("{language_code}", language_code)


def make_client(api_key: str | None = None) -> OpenAI:
    """Create an OpenAI client from api_key or OPENAI_API_KEY."""
    key = api_key or os.environ.get("OPENAI_API_KEY")
    if not key:
        raise ServiceError("OPENAI_API_KEY is not set")
    return OpenAI(api_key=key)


def transcribe(
    audio: bytes,
    client: OpenAI,
    filename: str = "clip.mp3",
    model: str = TRANSCRIBE_MODEL,
    fallback: str = FALLBACK_LOCALE,
) -> Transcription:
    """Transcribe an audio clip and detect its language from the text.

    Any language reported by the service is ignored. Text no rule
    recognizes gets the fallback locale.
    """
    if not audio:
        raise ServiceError("No audio to transcribe")
    with io.BytesIO(audio) as buf:
        buf.name = filename
        try:
            response = client.audio.transcriptions.create(
                model=model,
                file=buf,
                response_format="json",
            )
        except OpenAIError as e:
            logger.error("Transcription failed: %s", e)
            raise ServiceError(f"Transcription failed: {e}") from e

    text = (response.text or "").strip()
    language = detect(text, fallback)
    logger.info("Transcribed %d chars, detected %s", len(text), language)
    return Transcription(text=text, language=language)


def ask(
    user_text: str,
    language_code: str,
    client: OpenAI,
    model: str = CHAT_MODEL,
) -> str:
    """Send the transcript to the chat model and return its reply text."""
    messages = [
        {"role": "system", "content": build_system_prompt(language_code)},
        {"role": "user", "content": user_text},
    ]
    try:
        chat = client.chat.completions.create(model=model, messages=messages)
    except OpenAIError as e:
        logger.error("Chat completion failed: %s", e)
        raise ServiceError(f"Chat completion failed: {e}") from e

    if not chat.choices:
        logger.warning("Chat completion returned no choices")
        return ""
    return (chat.choices[0].message.content or "").strip()
