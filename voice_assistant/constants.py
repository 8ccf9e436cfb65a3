"""All magic numbers and configuration constants."""

CHUNK_SIZE = 150                    # chars, max length of one spoken segment
SPEECH_RATE = 0.9                   # rate factor: 0.9 = 10% slower than default
SPEECH_PITCH = 1.1                  # pitch factor: 1.1 = slightly raised
DEFAULT_LOCALE = "en-US"            # voice locale when a tag cannot be normalized
FALLBACK_LOCALE = "es-ES"           # detection result when no rule matches
MAX_RECORDING_SECONDS = 10          # hard cap on one recorded clip
CLIP_FORMAT = "mp3"                 # format clips are re-encoded to before upload
CLIP_BITRATE = "64k"                # bitrate for re-encoded clips
TRANSCRIBE_MODEL = "whisper-1"
CHAT_MODEL = "gpt-3.5-turbo"
ASSISTANT_NAME = "Nana"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5000
MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # request body cap for the HTTP API
PLAYER_COMMAND = ["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet", "-i", "-"]
VERSION = "0.1.0"
