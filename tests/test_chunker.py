"""Tests for reply segmentation."""

import pytest

from voice_assistant.chunker import split_segments, build_utterances
from voice_assistant.constants import CHUNK_SIZE
from voice_assistant.models import Utterance


def _regular_text(length=400, word_len=9):
    """Words of word_len chars separated by single spaces."""
    words = []
    total = 0
    i = 0
    while total < length:
        word = chr(ord("a") + i % 26) * word_len
        words.append(word)
        total += word_len + 1
        i += 1
    return " ".join(words)[:length].strip()


def test_short_text_round_trip():
    text = "Hola, soy Nana. ¿En qué puedo ayudarte hoy?"
    assert split_segments(text) == [text]


def test_exactly_limit_is_one_segment():
    text = ("abcd " * 30).strip()[:CHUNK_SIZE]
    assert len(text) <= CHUNK_SIZE
    assert split_segments(text) == [text]


def test_400_chars_regular_spacing():
    text = _regular_text(400)
    segments = split_segments(text)
    assert len(segments) >= 3
    for seg in segments:
        assert 0 < len(seg) <= CHUNK_SIZE
    # Words are never split
    assert " ".join(segments).split() == text.split()


def test_segments_end_at_whitespace_or_text_end():
    text = _regular_text(400)
    segments = split_segments(text)
    pos = 0
    for seg in segments:
        start = text.index(seg, pos)
        end = start + len(seg)
        assert end == len(text) or text[end].isspace()
        pos = end


def test_rejoin_normalizes_boundary_whitespace():
    text = "  " + "word " * 60 + "  "
    segments = split_segments(text)
    assert " ".join(segments) == " ".join(text.split())


def test_cut_at_last_space_within_limit():
    text = "a" * 150 + " b"
    assert split_segments(text) == ["a" * 150, "b"]


def test_newline_is_a_boundary():
    assert split_segments("line one\nline two", limit=10) == ["line one", "line two"]


def test_giant_token_kept_whole():
    token = "x" * 200
    assert split_segments(token) == [token]


def test_giant_token_between_words():
    text = "short " + "x" * 200 + " tail"
    assert split_segments(text) == ["short", "x" * 200, "tail"]


@pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
def test_empty_text_has_no_segments(text):
    assert split_segments(text) == []


def test_no_empty_segments_with_whitespace_runs():
    text = ("word" + " " * 20) * 20
    segments = split_segments(text, limit=30)
    assert all(seg.strip() for seg in segments)
    assert all(len(seg) <= 30 for seg in segments)


def test_invalid_limit():
    with pytest.raises(ValueError):
        split_segments("text", limit=0)


def test_build_utterances_numbers_and_normalizes():
    utterances = build_utterances("aaa bbb ccc", "fr-CA", limit=5)
    assert utterances == [
        Utterance(index=0, text="aaa", locale="fr-FR"),
        Utterance(index=1, text="bbb", locale="fr-FR"),
        Utterance(index=2, text="ccc", locale="fr-FR"),
    ]


def test_build_utterances_unknown_locale_is_english():
    utterances = build_utterances("hello", "de-DE")
    assert utterances[0].locale == "en-US"
