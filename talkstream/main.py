"""talkstream command line: stream answers, transcribe and synthesize speech.

Usage:
  # Stream an answer; intent picks /api/ask or /api/search
  talkstream ask "berita terbaru soal AI"

  # Force a profile
  talkstream ask --chat "jelaskan fotosintesis"

  # Full voice round trip: transcribe, answer, synthesize
  talkstream ask --audio question.webm --speak answer.wav

  talkstream transcribe question.webm
  talkstream speak "halo semua" -o halo.wav
  talkstream health

Answer text goes to stdout as it arrives; progress and logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

import requests

from talkstream.client.api import ping_backend, synthesize_speech, transcribe
from talkstream.client.profiles import converse
from talkstream.config import Settings, get_settings
from talkstream.streaming.events import StreamSinks
from talkstream.streaming.transport import HttpxTransport, build_client
from talkstream.utils.exceptions import TalkstreamError
from talkstream.utils.logging import get_logger, setup_logging
from talkstream.utils.text_processing import repair_spacing

logger = get_logger(__name__)


def _print_answer(delta: str) -> None:
    sys.stdout.write(delta)
    sys.stdout.flush()


def _print_progress(message: str) -> None:
    print(message, file=sys.stderr)


async def stream_answer(
    text: str,
    settings: Settings,
    sinks: StreamSinks,
    use_search: bool | None = None,
) -> str:
    async with build_client(settings) as client:
        return await converse(text, HttpxTransport(client), sinks, use_search=use_search)


def _cmd_ask(args: argparse.Namespace, settings: Settings) -> int:
    if args.audio:
        path = Path(args.audio)
        text = repair_spacing(transcribe(path.read_bytes(), filename=path.name, base_url=settings.backend_url))
        _print_progress(f"[transcript] {text}")
    else:
        text = " ".join(args.text)
    if not text.strip():
        print("Error: nothing to ask", file=sys.stderr)
        return 1

    use_search: bool | None = None
    if args.search or args.chat:
        use_search = args.search
    sinks = StreamSinks(on_answer=_print_answer, on_progress=_print_progress)
    full = asyncio.run(stream_answer(text, settings, sinks, use_search=use_search))
    sys.stdout.write("\n")

    if args.speak:
        audio = synthesize_speech(full, voice=args.voice or settings.TTS_VOICE, base_url=settings.backend_url)
        Path(args.speak).write_bytes(audio)
        _print_progress(f"[tts] wrote {args.speak}")
    return 0


def _cmd_transcribe(args: argparse.Namespace, settings: Settings) -> int:
    path = Path(args.audio)
    print(repair_spacing(transcribe(path.read_bytes(), filename=path.name, base_url=settings.backend_url)))
    return 0


def _cmd_speak(args: argparse.Namespace, settings: Settings) -> int:
    text = " ".join(args.text)
    audio = synthesize_speech(text, voice=args.voice or settings.TTS_VOICE, base_url=settings.backend_url)
    Path(args.output).write_bytes(audio)
    return 0


def _cmd_health(args: argparse.Namespace, settings: Settings) -> int:
    status = ping_backend(settings.backend_url)
    print(json.dumps(status.model_dump()))
    return 0 if status.ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="talkstream", description="Streaming voice assistant client")
    parser.add_argument("--url", default=None, help="Backend base URL (default: TALKSTREAM_BACKEND_URL)")
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL)")
    parser.add_argument("--log-format", choices=["json", "console"], default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    ask = sub.add_parser("ask", help="Stream an answer to a prompt")
    ask.add_argument("text", nargs="*", help="Prompt text")
    ask.add_argument("--audio", help="Transcribe this audio file and ask its text instead")
    profile = ask.add_mutually_exclusive_group()
    profile.add_argument("--search", action="store_true", help="Force the web search profile")
    profile.add_argument("--chat", action="store_true", help="Force the plain chat profile")
    ask.add_argument("--speak", metavar="WAV", help="Synthesize the full answer into this file")
    ask.add_argument("--voice", default=None, help="TTS voice (default: TTS_VOICE)")
    ask.set_defaults(handler=_cmd_ask)

    tr = sub.add_parser("transcribe", help="Speech-to-text for an audio file")
    tr.add_argument("audio")
    tr.set_defaults(handler=_cmd_transcribe)

    speak = sub.add_parser("speak", help="Text-to-speech into a WAV file")
    speak.add_argument("text", nargs="+")
    speak.add_argument("-o", "--output", default="speech.wav")
    speak.add_argument("--voice", default=None)
    speak.set_defaults(handler=_cmd_speak)

    hc = sub.add_parser("health", help="Ping the backend")
    hc.set_defaults(handler=_cmd_health)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.url:
        overrides["TALKSTREAM_BACKEND_URL"] = args.url
    if args.log_level:
        overrides["LOG_LEVEL"] = args.log_level
    if args.log_format:
        overrides["LOG_FORMAT"] = args.log_format
    settings = get_settings().model_copy(update=overrides)
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    try:
        return args.handler(args, settings)
    except TalkstreamError as exc:
        logger.error("command_failed", command=args.command, error_type=type(exc).__name__, error=str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except requests.RequestException as exc:
        print(f"Request failed: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
