"""Tests for recorded clip preparation."""

import io
from unittest.mock import patch

import pytest
from pydub import AudioSegment

from voice_assistant.audio import ClipError, DecoderNotFoundError, load_clip, prepare_clip
from voice_assistant.constants import MAX_RECORDING_SECONDS


def _duration_ms(mp3_bytes):
    return len(AudioSegment.from_file(io.BytesIO(mp3_bytes), format="mp3"))


def test_load_clip(wav_clip):
    audio = load_clip(wav_clip(500), "wav")
    assert abs(len(audio) - 500) < 50


def test_long_clip_trimmed(wav_clip):
    """12s clip is capped at MAX_RECORDING_SECONDS."""
    result = prepare_clip(wav_clip(12000), "wav")
    assert _duration_ms(result) <= MAX_RECORDING_SECONDS * 1000 + 100


def test_short_clip_kept(wav_clip):
    result = prepare_clip(wav_clip(2000), "wav")
    assert abs(_duration_ms(result) - 2000) < 200


def test_custom_limit(wav_clip):
    result = prepare_clip(wav_clip(3000), "wav", max_seconds=1)
    assert _duration_ms(result) <= 1100


def test_empty_clip_rejected():
    with pytest.raises(ClipError, match="empty"):
        prepare_clip(b"")


def test_garbage_clip_rejected():
    with pytest.raises(ClipError):
        prepare_clip(b"definitely not audio" * 10, "wav")


@patch("voice_assistant.audio.AudioSegment.from_file", side_effect=FileNotFoundError("ffmpeg"))
def test_missing_decoder(mock_from_file):
    with pytest.raises(DecoderNotFoundError, match="ffmpeg"):
        prepare_clip(b"audio", "webm")


def test_missing_encoder(wav_clip):
    clip = wav_clip(500)
    with patch("voice_assistant.audio.AudioSegment.export", side_effect=FileNotFoundError("ffmpeg")):
        with pytest.raises(DecoderNotFoundError):
            prepare_clip(clip, "wav")


def test_missing_decoder_is_a_clip_error():
    assert issubclass(DecoderNotFoundError, ClipError)
