"""
Pydantic v2 models shared by the relay API and the recorder client.
"""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

# ---------------------------------------------------------------------------
# Relay responses
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    timestamp: datetime
    success: bool = True


class TranscriptionResponse(BaseModel):
    """POST /transcribe success response."""

    text: str
    success: bool = True
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Envelope shared by every relay error response."""

    error: str
    details: str
    success: bool = False


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------


class RecorderStatus(StrEnum):
    """Possible states of the recorder."""

    idle = "idle"
    recording = "recording"
    processing = "processing"


class AudioPayload(BaseModel):
    """An assembled recording ready to be uploaded."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str
    filename: str


class TranscriptEntry(BaseModel):
    """A completed transcription kept in the in-memory history."""

    model_config = ConfigDict(frozen=True)

    id: int
    text: str
    timestamp: str
