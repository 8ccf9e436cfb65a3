"""One user turn: clip → transcript → locale → reply → speakable segments."""

import logging

from voice_assistant import services
from voice_assistant.audio import prepare_clip
from voice_assistant.chunker import build_utterances
from voice_assistant.config import Settings
from voice_assistant.constants import CLIP_FORMAT
from voice_assistant.models import Transcription, Turn

logger = logging.getLogger(__name__)


class Assistant:
    """Wires the transcription and chat collaborators around the core.

    The OpenAI client is created on first use, so an assistant can be built
    (and a server started) before an API key is configured.
    """

    def __init__(self, settings: Settings | None = None, client=None, speaker=None):
        self.settings = settings or Settings()
        self._client = client
        self.speaker = speaker

    @property
    def client(self):
        if self._client is None:
            self._client = services.make_client(self.settings.openai_api_key)
        return self._client

    def transcribe(self, audio: bytes, fmt: str | None = None) -> Transcription:
        """Cap the clip length, then transcribe and detect its language."""
        clip = prepare_clip(audio, fmt, max_seconds=self.settings.max_recording_seconds)
        return services.transcribe(
            clip, self.client,
            filename=f"clip.{CLIP_FORMAT}",
            model=self.settings.transcribe_model,
            fallback=self.settings.fallback_locale,
        )

    def ask(self, user_text: str, language_code: str) -> str:
        return services.ask(user_text, language_code, self.client, model=self.settings.chat_model)

    def handle_turn(self, audio: bytes, fmt: str | None = None) -> Turn:
        """Run a full turn. An empty transcript skips the chat call."""
        transcription = self.transcribe(audio, fmt)
        if not transcription.text:
            logger.info("Empty transcript, no reply")
            return Turn(transcript="", locale=transcription.language, reply="")

        reply = self.ask(transcription.text, transcription.language)
        return Turn(
            transcript=transcription.text,
            locale=transcription.language,
            reply=reply,
            utterances=build_utterances(reply, transcription.language),
        )

    def speak(self, turn: Turn):
        """Hand the reply to the speaker. Needs a running event loop."""
        if self.speaker is None:
            return None
        return self.speaker.speak(turn.reply, turn.locale)
