"""Sequential speech playback: one segment at a time, one sequence at a time.

Usage:
    speaker = Speaker(EdgeTTSOutput())
    speaker.speak(reply, "es-ES")   # fire-and-forget, needs a running loop
    await speaker.wait()            # optional: block until playback ends
    speaker.cancel()                # stop now, discard unplayed segments

State machine:
    IDLE → SPEAKING(0) → (segment 0 done) → SPEAKING(1) → ... → IDLE

cancel() or a new speak() moves to IDLE from any state. A playback error
ends the sequence as if its last segment had finished.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from voice_assistant.chunker import build_utterances
from voice_assistant.constants import CHUNK_SIZE, SPEECH_RATE, SPEECH_PITCH
from voice_assistant.models import PlaybackState, Utterance
from voice_assistant.voices import normalize_locale, voice_for_locale

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class SpeechSequence:
    """Handle for one speak() call."""
    utterances: list[Utterance]
    locale: str
    index: int = -1                   # segment currently (or last) playing
    played: list[int] = field(default_factory=list)
    errors: list[tuple[Utterance, Exception]] = field(default_factory=list)
    cancelled: bool = False
    task: asyncio.Task | None = None

    @property
    def done(self) -> bool:
        return self.task is None or self.task.done()


class Speaker:
    """Plays reply text through an audio output, strictly in order.

    The output must provide ``async play(utterance, voice, rate, pitch)``
    that returns once the segment has finished and raises on failure.
    """

    def __init__(
        self,
        output,
        rate: float = SPEECH_RATE,
        pitch: float = SPEECH_PITCH,
        limit: int = CHUNK_SIZE,
        voices: dict | None = None,
        on_error=None,
        on_state_change=None,
    ):
        self.output = output
        self.rate = rate
        self.pitch = pitch
        self.limit = limit
        self.voices = voices
        self.on_error = on_error
        self.on_state_change = on_state_change
        self._state = PlaybackState.IDLE
        self._current: SpeechSequence | None = None

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current(self) -> SpeechSequence | None:
        """The one active sequence, or None when idle."""
        return self._current

    @property
    def current_index(self) -> int | None:
        """Index i of SPEAKING(i), or None when idle."""
        if self._state is PlaybackState.IDLE or self._current is None:
            return None
        return self._current.index

    def _set_state(self, new_state: PlaybackState) -> None:
        old = self._state
        self._state = new_state
        index = self.current_index
        # IDLE → IDLE is not a change
        if old is new_state and new_state is PlaybackState.IDLE:
            return
        logger.debug("Speech: %s → %s (%s)", old.name, new_state.name, index)
        if self.on_state_change:
            try:
                self.on_state_change(new_state, index)
            except Exception:
                logger.exception("on_state_change callback failed")

    def speak(self, text: str, locale: str | None) -> SpeechSequence:
        """Start speaking text, replacing whatever is currently playing.

        Must be called with a running event loop. Returns immediately.
        """
        loop = asyncio.get_running_loop()
        self.cancel()

        utterances = build_utterances(text, locale, self.limit)
        voice_locale = normalize_locale(locale)
        sequence = SpeechSequence(utterances=utterances, locale=voice_locale)
        if not utterances:
            return sequence

        self._current = sequence
        sequence.task = loop.create_task(self._run(sequence))
        logger.info("Speaking %d segment(s) in %s", len(utterances), voice_locale)
        return sequence

    def cancel(self) -> None:
        """Stop the active sequence immediately. Safe to call when idle."""
        sequence = self._current
        if sequence is None:
            return
        self._current = None
        sequence.cancelled = True
        if sequence.task is not None and not sequence.task.done():
            sequence.task.cancel()
        logger.info("Speech cancelled at segment %d/%d",
                    sequence.index + 1, len(sequence.utterances))
        self._set_state(PlaybackState.IDLE)

    async def wait(self) -> None:
        """Wait until the active sequence (if any) ends or is cancelled."""
        sequence = self._current
        if sequence is None or sequence.task is None:
            return
        await asyncio.wait({sequence.task})

    async def _run(self, sequence: SpeechSequence) -> None:
        try:
            for utterance in sequence.utterances:
                # A replaced or cancelled sequence never starts another segment
                if self._current is not sequence:
                    return
                sequence.index = utterance.index
                self._set_state(PlaybackState.SPEAKING)
                voice = voice_for_locale(utterance.locale, self.voices)
                try:
                    await self.output.play(utterance, voice, self.rate, self.pitch)
                except asyncio.CancelledError:
                    raise
                except Exception as exc:
                    self._report_error(sequence, utterance, exc)
                    return
                sequence.played.append(utterance.index)
        finally:
            if self._current is sequence:
                self._current = None
                self._set_state(PlaybackState.IDLE)

    def _report_error(self, sequence: SpeechSequence, utterance: Utterance, exc: Exception) -> None:
        sequence.errors.append((utterance, exc))
        logger.warning("Playback failed on segment %d/%d: %s",
                       utterance.index + 1, len(sequence.utterances), exc)
        if self.on_error:
            try:
                self.on_error(utterance, exc)
            except Exception:
                logger.exception("on_error callback failed")
