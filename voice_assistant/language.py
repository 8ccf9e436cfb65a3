"""Guess the spoken language of a transcript from its script and keywords."""

import re

from voice_assistant.constants import FALLBACK_LOCALE

_JAPANESE_RE = re.compile(r"[\u3040-\u30ff\u3400-\u4dbf\u4e00-\u9faf]")
_CYRILLIC_RE = re.compile(r"[а-яА-ЯёЁ]")

KEYWORDS = {
    "fr-FR": ("merci", "bonjour", "français"),
    "es-ES": ("gracias", "hola", "español"),
    "pt-PT": ("obrigado", "português"),
    "it-IT": ("ciao", "grazie", "italiano"),
    "en-US": ("thank", "hello", "english"),
}


def _keyword_pattern(words: tuple[str, ...]) -> re.Pattern:
    """Case-insensitive, word-bounded alternation of keywords."""
    alternation = "|".join(re.escape(w) for w in words)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


def _matches(pattern: re.Pattern):
    return lambda text: pattern.search(text) is not None


# Evaluated top to bottom, first match wins. Script checks must stay ahead of
# keyword checks: mixed Japanese/English text resolves to Japanese.
RULES = [
    (_matches(_JAPANESE_RE), "ja-JP"),
    (_matches(_CYRILLIC_RE), "ru-RU"),
    (_matches(_keyword_pattern(KEYWORDS["fr-FR"])), "fr-FR"),
    (_matches(_keyword_pattern(KEYWORDS["es-ES"])), "es-ES"),
    (_matches(_keyword_pattern(KEYWORDS["pt-PT"])), "pt-PT"),
    (_matches(_keyword_pattern(KEYWORDS["it-IT"])), "it-IT"),
    (_matches(_keyword_pattern(KEYWORDS["en-US"])), "en-US"),
]


def detect(text: str | None, fallback: str = FALLBACK_LOCALE) -> str:
    """Return the locale tag of the first rule matching text.

    Never raises. Empty or missing text, and text no rule recognizes,
    yields the fallback tag.
    """
    if not text:
        return fallback
    for predicate, tag in RULES:
        if predicate(text):
            return tag
    return fallback
