"""Flask HTTP API for the browser front end.

Routes:
- POST /api/whisper  multipart "audio" → {text, language}
- POST /api/ask      JSON {userText, languageCode} → {reply}
- POST /api/turn     multipart "audio" → {text, language, reply, segments}
- GET  /api/ping     → {ok, version}

The browser speaks the reply itself; /api/turn also returns the reply
already split into speakable segments so the client can queue them in order.
"""

import logging
import os

from flask import Flask, jsonify, request

from voice_assistant.assistant import Assistant
from voice_assistant.audio import ClipError, DecoderNotFoundError
from voice_assistant.config import load_settings
from voice_assistant.constants import MAX_UPLOAD_BYTES, VERSION
from voice_assistant.language import detect
from voice_assistant.services import ServiceError

logger = logging.getLogger(__name__)


def _format_of(filename: str | None) -> str | None:
    """Container format from an upload's extension; None lets ffmpeg probe."""
    ext = os.path.splitext(filename or "")[1].lstrip(".").lower()
    return ext or None


def _uploaded_audio():
    file = request.files.get("audio")
    if file is None:
        return None, None
    return file.read(), _format_of(file.filename)


def create_app(assistant: Assistant | None = None) -> Flask:
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = MAX_UPLOAD_BYTES
    app.config["ASSISTANT"] = assistant or Assistant(load_settings())

    def _assistant() -> Assistant:
        return app.config["ASSISTANT"]

    @app.errorhandler(ServiceError)
    def handle_service_error(e):
        logger.error("Service error: %s", e)
        return jsonify({"error": str(e)}), 502

    @app.errorhandler(ClipError)
    def handle_clip_error(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(DecoderNotFoundError)
    def handle_decoder_missing(e):
        logger.error("Audio decoder unavailable: %s", e)
        return jsonify({"error": str(e)}), 503

    @app.errorhandler(413)
    def handle_too_large(e):
        return jsonify({"error": "Upload too large"}), 413

    @app.post("/api/whisper")
    def api_whisper():
        data, fmt = _uploaded_audio()
        if not data:
            return jsonify({"error": "No file uploaded"}), 400
        transcription = _assistant().transcribe(data, fmt)
        return jsonify({"text": transcription.text, "language": transcription.language})

    @app.post("/api/ask")
    def api_ask():
        data = request.get_json(silent=True) or {}
        user_text = (data.get("userText") or "").strip()
        if not user_text:
            return jsonify({"error": "No text provided"}), 400
        language_code = (data.get("languageCode") or "").strip()
        if not language_code:
            language_code = detect(user_text, _assistant().settings.fallback_locale)
        reply = _assistant().ask(user_text, language_code)
        return jsonify({"reply": reply})

    @app.post("/api/turn")
    def api_turn():
        data, fmt = _uploaded_audio()
        if not data:
            return jsonify({"error": "No file uploaded"}), 400
        turn = _assistant().handle_turn(data, fmt)
        return jsonify({
            "text": turn.transcript,
            "language": turn.locale,
            "reply": turn.reply,
            "segments": [u.text for u in turn.utterances],
        })

    @app.get("/api/ping")
    def api_ping():
        return jsonify({"ok": True, "version": VERSION})

    return app
