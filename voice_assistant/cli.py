"""CLI interface with subcommand routing."""

import argparse
import asyncio
import logging
import os
import shutil
import sys

from voice_assistant.assistant import Assistant
from voice_assistant.audio import ClipError
from voice_assistant.chunker import split_segments
from voice_assistant.config import load_settings
from voice_assistant.constants import CHUNK_SIZE, VERSION
from voice_assistant.language import detect
from voice_assistant.services import ServiceError
from voice_assistant.speech import Speaker
from voice_assistant.tts import EdgeTTSOutput, FileOutput
from voice_assistant.voices import VOICE_TABLE, normalize_locale


def _check_ffmpeg(need_player: bool = False):
    """Verify ffmpeg (and ffplay, for live playback) is installed."""
    tools = ["ffmpeg", "ffplay"] if need_player else ["ffmpeg"]
    for tool in tools:
        if not shutil.which(tool):
            print(f"Error: {tool} is required but not found.", file=sys.stderr)
            print("Install with: brew install ffmpeg", file=sys.stderr)
            raise SystemExit(1)


def _join_text(args) -> str:
    text = " ".join(args.text).strip()
    if not text:
        print("Error: No text given.", file=sys.stderr)
        raise SystemExit(1)
    return text


def _make_output(out_dir: str | None):
    if out_dir:
        return FileOutput(out_dir)
    _check_ffmpeg(need_player=True)
    return EdgeTTSOutput()


async def _speak(output, text: str, locale: str, voice: str | None = None):
    """Speak text to completion and return the finished sequence.

    voice, when given, replaces the default voice for locale.
    """
    voices = {normalize_locale(locale): voice} if voice else None
    speaker = Speaker(output, voices=voices)
    sequence = speaker.speak(text, locale)
    await speaker.wait()
    return sequence


def _play(output, text: str, locale: str, voice: str | None = None) -> None:
    sequence = asyncio.run(_speak(output, text, locale, voice))
    for utterance, exc in sequence.errors:
        print(f"Error: Segment {utterance.index + 1} failed: {exc}", file=sys.stderr)
    if sequence.errors:
        raise SystemExit(1)


def cmd_detect(args):
    """Print the detected locale of some text."""
    print(detect(" ".join(args.text), load_settings().fallback_locale))


def cmd_chunk(args):
    """Print the speakable segments of some text."""
    text = _join_text(args)
    try:
        segments = split_segments(text, args.limit)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)
    for i, seg in enumerate(segments):
        print(f"{i + 1:3d} [{len(seg):3d}] {seg}")


def cmd_voices(args):
    """List supported locales and their voices."""
    print("Supported voices:")
    for locale, voice in VOICE_TABLE.items():
        print(f"  {locale:<6} → {voice}")


def cmd_say(args):
    """Speak text aloud, or write it to MP3 segments with --out."""
    text = _join_text(args)
    locale = normalize_locale(args.lang or detect(text, load_settings().fallback_locale))
    output = _make_output(args.out)
    print(f"Speaking in {locale}...")
    _play(output, text, locale, args.voice)
    if args.out:
        print(f"Done: {len(output.paths)} file(s) in {args.out}")


def cmd_ask(args):
    """Run one full turn from a recorded audio file."""
    file_path = args.file
    if not os.path.exists(file_path):
        print(f"Error: File not found: {file_path}", file=sys.stderr)
        raise SystemExit(1)
    _check_ffmpeg()

    with open(file_path, "rb") as f:
        data = f.read()

    fmt = os.path.splitext(file_path)[1].lstrip(".").lower() or None
    assistant = Assistant(load_settings())
    try:
        turn = assistant.handle_turn(data, fmt)
    except (ServiceError, ClipError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)

    print(f"You:      {turn.transcript}")
    print(f"Detected: {turn.locale}")
    print(f"Reply:    {turn.reply}")

    if args.no_speak or not turn.reply:
        return
    _play(_make_output(args.out), turn.reply, turn.locale, args.voice)


def cmd_serve(args):
    """Run the HTTP API."""
    from voice_assistant.web import create_app

    _check_ffmpeg()
    settings = load_settings()
    host = args.host or settings.host
    port = args.port or settings.port
    app = create_app(Assistant(settings))
    app.run(host=host, port=port)


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="voice-assistant",
        description="Voice Assistant: transcribe, reply, and speak in the user's language",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # detect
    detect_parser = subparsers.add_parser("detect", help="Detect the language of some text")
    detect_parser.add_argument("text", nargs="*", help="Text to inspect")
    detect_parser.set_defaults(func=cmd_detect)

    # chunk
    chunk_parser = subparsers.add_parser("chunk", help="Split text into speakable segments")
    chunk_parser.add_argument("text", nargs="+", help="Text to split")
    chunk_parser.add_argument("--limit", type=int, default=CHUNK_SIZE, help="Max segment length")
    chunk_parser.set_defaults(func=cmd_chunk)

    # voices
    voices_parser = subparsers.add_parser("voices", help="List supported voices")
    voices_parser.set_defaults(func=cmd_voices)

    # say
    say_parser = subparsers.add_parser("say", help="Speak text aloud")
    say_parser.add_argument("text", nargs="+", help="Text to speak")
    say_parser.add_argument("--lang", help="Locale tag (default: detected from text)")
    say_parser.add_argument("--out", help="Write MP3 segments to this directory instead of playing")
    say_parser.add_argument("--voice", help="edge-tts voice to use instead of the default for the locale")
    say_parser.set_defaults(func=cmd_say)

    # ask
    ask_parser = subparsers.add_parser("ask", help="Run a full turn from an audio file")
    ask_parser.add_argument("file", help="Path to the recorded clip")
    ask_parser.add_argument("--out", help="Write the spoken reply to this directory instead of playing")
    ask_parser.add_argument("--no-speak", action="store_true", help="Print the reply only")
    ask_parser.add_argument("--voice", help="edge-tts voice to use instead of the default for the locale")
    ask_parser.set_defaults(func=cmd_ask)

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Bind address")
    serve_parser.add_argument("--port", type=int, help="Port")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return

    args.func(args)
