"""Response models for the backend's non-streaming endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthStatus(BaseModel):
    ok: bool = False


class TranscriptResponse(BaseModel):
    text: str | None = None


class SpeechResponse(BaseModel):
    audio_base64: str = Field(description="Base64-encoded WAV audio")
