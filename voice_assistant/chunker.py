"""Split reply text into bounded segments for sequential speech."""

from voice_assistant.constants import CHUNK_SIZE
from voice_assistant.models import Utterance
from voice_assistant.voices import normalize_locale


def _last_space_at_or_before(text: str, limit: int) -> int:
    """Index of the last whitespace in text[:limit + 1], or -1."""
    for i in range(min(limit, len(text) - 1), 0, -1):
        if text[i].isspace():
            return i
    return -1


def _end_of_token(text: str) -> int:
    """Index of the first whitespace in text, or len(text)."""
    for i, ch in enumerate(text):
        if ch.isspace():
            return i
    return len(text)


def split_segments(text: str, limit: int = CHUNK_SIZE) -> list[str]:
    """Split text into segments of at most limit characters.

    Greedy scan: each cut falls at the last whitespace at or before the
    limit, so words are never split. A single token longer than the limit
    is kept whole as its own segment. Whitespace around cuts is dropped,
    so " ".join(segments) reproduces the text with those runs collapsed.
    """
    if limit < 1:
        raise ValueError(f"limit must be positive, got {limit}")

    remaining = (text or "").strip()
    segments = []

    while len(remaining) > limit:
        cut = _last_space_at_or_before(remaining, limit)
        if cut == -1:
            cut = _end_of_token(remaining)
        segments.append(remaining[:cut].rstrip())
        remaining = remaining[cut:].lstrip()

    if remaining:
        segments.append(remaining)

    return segments


def build_utterances(text: str, locale: str | None, limit: int = CHUNK_SIZE) -> list[Utterance]:
    """Segment text and tag each piece with the normalized voice locale."""
    voice_locale = normalize_locale(locale)
    return [
        Utterance(index=i, text=segment, locale=voice_locale)
        for i, segment in enumerate(split_segments(text, limit))
    ]
