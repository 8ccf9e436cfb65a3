"""Recorded clip preparation: decode, cap duration, re-encode for upload."""

import io
import logging

from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError

from voice_assistant.constants import MAX_RECORDING_SECONDS, CLIP_FORMAT, CLIP_BITRATE

logger = logging.getLogger(__name__)


class ClipError(Exception):
    """The uploaded audio could not be decoded."""


class DecoderNotFoundError(ClipError):
    """ffmpeg, which pydub shells out to, is not installed."""


def load_clip(data: bytes, fmt: str | None = None) -> AudioSegment:
    """Decode raw audio bytes. fmt=None lets ffmpeg probe the container."""
    if not data:
        raise ClipError("Audio clip is empty")
    try:
        return AudioSegment.from_file(io.BytesIO(data), format=fmt)
    except FileNotFoundError as e:
        raise DecoderNotFoundError(f"Audio decoder not available: {e}") from e
    except (CouldntDecodeError, IndexError) as e:
        raise ClipError(f"Could not decode audio clip: {e}") from e


def prepare_clip(
    data: bytes,
    fmt: str | None = None,
    max_seconds: float = MAX_RECORDING_SECONDS,
) -> bytes:
    """Trim a recorded clip to max_seconds and re-encode it.

    Clips at or under the limit are re-encoded unchanged.
    Returns the encoded bytes (CLIP_FORMAT).
    """
    audio = load_clip(data, fmt)

    target_ms = int(max_seconds * 1000)
    if len(audio) > target_ms:
        logger.info("Clip is %.1fs, trimming to %ss", len(audio) / 1000, max_seconds)
        audio = audio[:target_ms]

    buf = io.BytesIO()
    try:
        audio.export(buf, format=CLIP_FORMAT, bitrate=CLIP_BITRATE)
    except FileNotFoundError as e:
        raise DecoderNotFoundError(f"Audio encoder not available: {e}") from e
    return buf.getvalue()
