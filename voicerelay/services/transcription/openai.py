"""OpenAI transcription provider.

Streams the buffered upload to ``/v1/audio/transcriptions`` as a multipart
request via ``httpx.AsyncClient``. A single upstream failure is a single
relay failure: nothing here retries.
"""

import logging

import httpx

from voicerelay.core.config import Settings
from voicerelay.core.exceptions import UpstreamTranscriptionError
from voicerelay.services.ingestion.artifact import UploadArtifact
from voicerelay.services.transcription.base import BaseTranscriber

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "audio.mp3"
MALFORMED_RESPONSE = "Malformed response from transcription service"


class OpenAITranscriber(BaseTranscriber):
    """Speech-to-text via the OpenAI audio transcription endpoint.

    Args:
        settings: Relay settings (credential, base URL, model, timeout).
        client: Optional pre-built ``httpx.AsyncClient``; one is created
            from settings when omitted.
    """

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None) -> None:
        self._url = settings.transcription_url
        self._model = settings.transcription_model
        self._api_key = settings.openai_api_key
        self._client = client or httpx.AsyncClient(timeout=settings.transcription_timeout)

    async def transcribe(self, artifact: UploadArtifact) -> str:
        filename = artifact.filename or DEFAULT_FILENAME
        try:
            with artifact.path.open("rb") as audio_file:
                response = await self._client.post(
                    self._url,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                    data={"model": self._model},
                    files={"file": (filename, audio_file, artifact.mime_type)},
                )
        except httpx.HTTPError as exc:
            logger.error("Transcription request failed: %s", exc)
            raise UpstreamTranscriptionError(details=str(exc) or type(exc).__name__) from exc

        if response.is_error:
            details = _error_details(response)
            logger.error("Transcription error (HTTP %d): %s", response.status_code, details)
            raise UpstreamTranscriptionError(details=details, status_code=response.status_code)

        try:
            text = response.json()["text"]
        except (ValueError, KeyError, TypeError) as exc:
            raise UpstreamTranscriptionError(details=MALFORMED_RESPONSE) from exc
        if not isinstance(text, str):
            raise UpstreamTranscriptionError(details=MALFORMED_RESPONSE)

        logger.info("Transcribed %r (%d chars)", filename, len(text))
        return text

    async def aclose(self) -> None:
        await self._client.aclose()


def _error_details(response: httpx.Response) -> str:
    """Pull ``error.message`` out of an upstream error body, falling back to raw text."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
    return response.text or response.reason_phrase or f"HTTP {response.status_code}"
