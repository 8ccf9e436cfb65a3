"""Audio output for spoken segments: edge-tts synthesis, ffplay playback, MP3 files."""

import asyncio
import logging
import os

import edge_tts

from voice_assistant.constants import PLAYER_COMMAND, SPEECH_RATE, SPEECH_PITCH
from voice_assistant.models import Utterance
from voice_assistant.voices import format_rate, format_pitch

logger = logging.getLogger(__name__)


class OutputError(Exception):
    """A segment could not be turned into sound."""


class SynthesisError(OutputError):
    pass


class PlaybackError(OutputError):
    pass


async def synthesize(
    text: str,
    voice: str,
    rate: float = SPEECH_RATE,
    pitch: float = SPEECH_PITCH,
) -> bytes:
    """Synthesize text to MP3 bytes with edge-tts.

    No retries: a failed or empty synthesis raises SynthesisError.
    """
    communicate = edge_tts.Communicate(
        text, voice, rate=format_rate(rate), pitch=format_pitch(pitch),
    )
    chunks = []
    try:
        async for message in communicate.stream():
            if message["type"] == "audio":
                chunks.append(message["data"])
    except Exception as e:
        raise SynthesisError(f"TTS failed for: {text[:50]}... ({e})") from e

    audio = b"".join(chunks)
    # Empty stream counts as failure
    if not audio:
        raise SynthesisError(f"TTS produced no audio for: {text[:50]}...")
    return audio


class EdgeTTSOutput:
    """Synthesize each segment with edge-tts and play it through ffplay.

    Cancelling the awaiting task kills the player immediately.
    """

    def __init__(self, player_command: list[str] | None = None):
        self.player_command = list(player_command or PLAYER_COMMAND)

    async def play(self, utterance: Utterance, voice: str, rate: float, pitch: float) -> None:
        audio = await synthesize(utterance.text, voice, rate, pitch)
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.player_command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except FileNotFoundError as e:
            raise PlaybackError(f"Player not found: {self.player_command[0]}") from e

        try:
            await proc.communicate(audio)
        except asyncio.CancelledError:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
            raise

        if proc.returncode != 0:
            raise PlaybackError(f"{self.player_command[0]} exited with code {proc.returncode}")


def _segment_filename(utterance: Utterance) -> str:
    """Generate filename for a spoken segment."""
    return f"{utterance.index:03d}_{utterance.locale}.mp3"


class FileOutput:
    """Write each segment to an MP3 file instead of playing it."""

    def __init__(self, output_dir: str):
        self.output_dir = output_dir
        self.paths: list[str] = []

    async def play(self, utterance: Utterance, voice: str, rate: float, pitch: float) -> None:
        audio = await synthesize(utterance.text, voice, rate, pitch)
        os.makedirs(self.output_dir, exist_ok=True)
        filename = _segment_filename(utterance)
        output_path = os.path.join(self.output_dir, filename)
        with open(output_path, "wb") as f:
            f.write(audio)
        print(f"  Segment {utterance.index + 1}: {filename}")
        self.paths.append(output_path)
