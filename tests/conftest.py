"""Shared fixtures for voice assistant tests."""

import asyncio
import io
from unittest.mock import MagicMock

import pytest
from pydub import AudioSegment

from voice_assistant.tts import PlaybackError


class RecordingOutput:
    """Audio output that finishes each segment on the next loop iteration."""

    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.calls = []
        self.started = []
        self.finished = []
        self.active = 0
        self.max_active = 0

    async def play(self, utterance, voice, rate, pitch):
        self.calls.append((utterance, voice, rate, pitch))
        self.started.append(utterance.text)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(0)
            if utterance.index in self.fail_on:
                raise PlaybackError(f"device lost on {utterance.text!r}")
        finally:
            self.active -= 1
        self.finished.append(utterance.text)


class GatedOutput(RecordingOutput):
    """Audio output whose segments only finish when their gate is opened."""

    def __init__(self):
        super().__init__()
        self.gates = []

    async def play(self, utterance, voice, rate, pitch):
        self.calls.append((utterance, voice, rate, pitch))
        self.started.append(utterance.text)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        gate = asyncio.Event()
        self.gates.append(gate)
        try:
            await gate.wait()
        finally:
            self.active -= 1
        self.finished.append(utterance.text)

    def open_all(self):
        for gate in self.gates:
            gate.set()


@pytest.fixture
def recording_output():
    return RecordingOutput()


@pytest.fixture
def gated_output():
    return GatedOutput()


@pytest.fixture
def wav_clip():
    """Build WAV bytes of silence with a given duration in ms."""
    def make(duration_ms=1000):
        buf = io.BytesIO()
        AudioSegment.silent(duration=duration_ms).export(buf, format="wav")
        return buf.getvalue()
    return make


@pytest.fixture
def fake_client():
    """MagicMock standing in for an OpenAI client."""
    client = MagicMock()
    client.audio.transcriptions.create.return_value = MagicMock(text="Gracias, hola amigo")
    message = MagicMock(content="¡Hola! ¿En qué puedo ayudarte hoy?")
    client.chat.completions.create.return_value = MagicMock(choices=[MagicMock(message=message)])
    return client


@pytest.fixture
def failing_output():
    """Build a RecordingOutput that fails on the given segment indexes."""
    def make(fail_on):
        return RecordingOutput(fail_on=fail_on)
    return make
