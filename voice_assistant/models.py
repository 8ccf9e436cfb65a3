"""Data models for a single assistant turn."""

from dataclasses import dataclass, field
from enum import Enum


class PlaybackState(Enum):
    IDLE = "idle"
    SPEAKING = "speaking"


@dataclass(frozen=True)
class Transcription:
    text: str
    language: str      # locale tag from detect(), never from the service


@dataclass(frozen=True)
class Utterance:
    index: int
    text: str
    locale: str        # normalized voice locale, e.g. "es-ES"


@dataclass
class Turn:
    transcript: str
    locale: str
    reply: str
    utterances: list[Utterance] = field(default_factory=list)
