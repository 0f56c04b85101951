"""Synchronous helpers for the backend's non-streaming endpoints."""

from __future__ import annotations

import base64
import binascii
from typing import Any

import requests

from talkstream.client.schemas import HealthStatus, SpeechResponse, TranscriptResponse
from talkstream.config import get_settings
from talkstream.utils.exceptions import SpeechError, TransportFailure
from talkstream.utils.logging import get_logger

logger = get_logger(__name__)


def get_base_url() -> str:
    """Backend API base URL (no trailing slash)."""
    return get_settings().backend_url


def health(base_url: str | None = None) -> HealthStatus:
    """GET /health."""
    url = f"{base_url or get_base_url()}/health"
    r = requests.get(url, timeout=5)
    r.raise_for_status()
    return HealthStatus.model_validate(r.json())


def debug_env(base_url: str | None = None) -> dict[str, Any]:
    """GET /debug/env returns the backend configuration report. Non-JSON bodies give {}."""
    url = f"{base_url or get_base_url()}/debug/env"
    r = requests.get(url, timeout=5)
    try:
        return r.json()
    except ValueError:
        return {}


def ping_backend(base_url: str | None = None) -> HealthStatus:
    """Check /health, then /debug/env. Only a /health failure is raised."""
    base_url = base_url or get_base_url()
    try:
        status = health(base_url)
    except requests.RequestException as exc:
        logger.error("ping_failed", url=base_url, error=str(exc))
        raise TransportFailure(f"health check failed: {exc}") from exc
    logger.info("ping_health", url=base_url, ok=status.ok)

    try:
        env_report = debug_env(base_url)
        logger.info("ping_debug_env", env=env_report)
    except requests.RequestException as exc:
        logger.warning("ping_debug_env_failed", error=str(exc))
    return status


def transcribe(
    audio: bytes,
    filename: str = "audio.webm",
    content_type: str = "audio/webm",
    base_url: str | None = None,
) -> str:
    """POST /api/stt: upload recorded audio, return the transcript text."""
    settings = get_settings()
    url = f"{base_url or settings.backend_url}/api/stt"
    r = requests.post(
        url,
        files={"audio": (filename, audio, content_type)},
        timeout=settings.REQUEST_TIMEOUT,
    )
    if not r.ok:
        raise SpeechError("STT", r.status_code, r.text[:200])
    transcript = TranscriptResponse.model_validate(r.json()).text or ""
    logger.info("stt_complete", audio_bytes=len(audio), chars=len(transcript))
    return transcript


def synthesize_speech(
    text: str,
    voice: str | None = None,
    base_url: str | None = None,
) -> bytes:
    """POST /api/tts: returns the decoded WAV bytes."""
    settings = get_settings()
    url = f"{base_url or settings.backend_url}/api/tts"
    payload = {"text": text, "voice": voice or settings.TTS_VOICE}
    r = requests.post(url, json=payload, timeout=settings.REQUEST_TIMEOUT)
    if not r.ok:
        raise SpeechError("TTS", r.status_code, r.text[:200])

    speech = SpeechResponse.model_validate(r.json())
    try:
        audio = base64.b64decode(speech.audio_base64, validate=True)
    except binascii.Error as exc:
        raise SpeechError("TTS", detail="invalid audio payload") from exc
    logger.info("tts_complete", chars=len(text), audio_bytes=len(audio))
    return audio
