"""Voice locale normalization and edge-tts voice selection."""

import logging

from voice_assistant.constants import DEFAULT_LOCALE, SPEECH_RATE, SPEECH_PITCH

logger = logging.getLogger(__name__)

# Language prefix → supported voice locale
LOCALE_TABLE = {
    "es": "es-ES",
    "fr": "fr-FR",
    "pt": "pt-PT",
    "it": "it-IT",
    "ru": "ru-RU",
    "ja": "ja-JP",
}

# Hardcoded neural voice per supported locale (avoids network call at startup)
VOICE_TABLE = {
    "en-US": "en-US-JennyNeural",
    "es-ES": "es-ES-ElviraNeural",
    "fr-FR": "fr-FR-DeniseNeural",
    "pt-PT": "pt-PT-RaquelNeural",
    "it-IT": "it-IT-ElsaNeural",
    "ru-RU": "ru-RU-SvetlanaNeural",
    "ja-JP": "ja-JP-NanamiNeural",
}


def normalize_locale(tag: str | None) -> str:
    """Map any locale tag onto the fixed set of supported voice locales.

    Only the language prefix counts: "es", "es-MX" and "es_es" all become
    "es-ES". Anything unrecognized, including None or "", becomes "en-US".
    """
    if not tag:
        return DEFAULT_LOCALE
    prefix = tag.strip().replace("_", "-").split("-")[0].lower()
    return LOCALE_TABLE.get(prefix, DEFAULT_LOCALE)


def voice_for_locale(tag: str | None, overrides: dict | None = None) -> str:
    """Return the voice name for a locale tag.

    Overrides map a normalized locale to a custom voice and take priority
    over VOICE_TABLE.
    """
    locale = normalize_locale(tag)
    if overrides and overrides.get(locale):
        return overrides[locale]
    voice = VOICE_TABLE.get(locale)
    if voice is None:
        logger.warning("No voice for locale %s, using %s", locale, DEFAULT_LOCALE)
        voice = VOICE_TABLE[DEFAULT_LOCALE]
    return voice


def format_rate(rate: float = SPEECH_RATE) -> str:
    """Convert a rate factor to edge-tts form: 0.9 → "-10%"."""
    percent = round((rate - 1.0) * 100)
    return f"{percent:+d}%"


def format_pitch(pitch: float = SPEECH_PITCH) -> str:
    """Convert a pitch factor to edge-tts form: 1.1 → "+10Hz".

    One Hz per percent of pitch change.
    """
    hz = round((pitch - 1.0) * 100)
    return f"{hz:+d}Hz"
