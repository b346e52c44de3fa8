"""Unit tests for the OpenAI forwarding adapter.

The upstream is replaced by ``httpx.MockTransport`` so the outbound
request can be inspected and every upstream outcome simulated.
"""

import httpx
import pytest

from voicerelay.core.exceptions import UpstreamTranscriptionError
from voicerelay.services.ingestion import UploadArtifact
from voicerelay.services.transcription import create_transcriber
from voicerelay.services.transcription.openai import OpenAITranscriber

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _transcriber(settings, handler) -> OpenAITranscriber:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenAITranscriber(settings, client=client)


@pytest.fixture
def artifact(upload_dir):
    artifact = UploadArtifact("audio/webm", "recording.webm", upload_dir)
    artifact.write(b"webm-audio-bytes")
    artifact.seal()
    yield artifact
    artifact.cleanup()


# ---------------------------------------------------------------------------
# Outbound request
# ---------------------------------------------------------------------------


class TestOutboundRequest:
    """The forwarded request carries the audio, the model and the credential."""

    async def test_request_shape(self, settings, artifact):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["request"] = request
            return httpx.Response(200, json={"text": "hello world"})

        transcriber = _transcriber(settings, handler)
        await transcriber.transcribe(artifact)

        request = captured["request"]
        body = request.content
        assert request.method == "POST"
        assert str(request.url) == "https://upstream.test/v1/audio/transcriptions"
        assert request.headers["authorization"] == "Bearer sk-test"
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert b'name="model"' in body
        assert b"whisper-1" in body
        assert b'filename="recording.webm"' in body
        assert b"Content-Type: audio/webm" in body
        assert b"webm-audio-bytes" in body

    async def test_missing_filename_falls_back(self, settings, upload_dir):
        artifact = UploadArtifact("audio/mpeg", None, upload_dir)
        artifact.write(b"mp3")
        artifact.seal()
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["body"] = request.content
            return httpx.Response(200, json={"text": ""})

        try:
            await _transcriber(settings, handler).transcribe(artifact)
        finally:
            artifact.cleanup()

        assert b'filename="audio.mp3"' in captured["body"]


# ---------------------------------------------------------------------------
# Upstream outcomes
# ---------------------------------------------------------------------------


class TestUpstreamOutcomes:
    """Success returns the text; every failure becomes UpstreamTranscriptionError."""

    async def test_success_returns_text(self, settings, artifact):
        transcriber = _transcriber(
            settings, lambda request: httpx.Response(200, json={"text": "hello world"})
        )
        assert await transcriber.transcribe(artifact) == "hello world"

    async def test_unauthorized_propagates_status_and_message(self, settings, artifact):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                401,
                json={"error": {"message": "Incorrect API key provided", "type": "invalid_request_error"}},
            )

        with pytest.raises(UpstreamTranscriptionError) as exc_info:
            await _transcriber(settings, handler).transcribe(artifact)

        assert exc_info.value.status_code == 401
        assert exc_info.value.error == "Transcription failed"
        assert exc_info.value.details == "Incorrect API key provided"

    async def test_non_json_error_uses_body_text(self, settings, artifact):
        transcriber = _transcriber(
            settings, lambda request: httpx.Response(502, text="Bad gateway from proxy")
        )

        with pytest.raises(UpstreamTranscriptionError) as exc_info:
            await transcriber.transcribe(artifact)

        assert exc_info.value.status_code == 502
        assert exc_info.value.details == "Bad gateway from proxy"

    async def test_connection_error_maps_to_500(self, settings, artifact):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamTranscriptionError) as exc_info:
            await _transcriber(settings, handler).transcribe(artifact)

        assert exc_info.value.status_code == 500
        assert "connection refused" in exc_info.value.details

    async def test_success_without_text_is_malformed(self, settings, artifact):
        transcriber = _transcriber(
            settings, lambda request: httpx.Response(200, json={"unexpected": True})
        )

        with pytest.raises(UpstreamTranscriptionError, match="Malformed"):
            await transcriber.transcribe(artifact)

    async def test_success_with_invalid_json_is_malformed(self, settings, artifact):
        transcriber = _transcriber(settings, lambda request: httpx.Response(200, text="ok"))

        with pytest.raises(UpstreamTranscriptionError) as exc_info:
            await transcriber.transcribe(artifact)

        assert exc_info.value.status_code == 500

    async def test_single_attempt_only(self, settings, artifact):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503, json={"error": {"message": "overloaded"}})

        with pytest.raises(UpstreamTranscriptionError):
            await _transcriber(settings, handler).transcribe(artifact)

        assert len(calls) == 1


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


class TestCreateTranscriber:
    async def test_openai_provider(self, settings):
        transcriber = create_transcriber(settings)
        assert isinstance(transcriber, OpenAITranscriber)
        await transcriber.aclose()

    def test_unknown_provider(self, settings):
        other = settings.model_copy(update={"transcription_provider": "acme"})
        with pytest.raises(ValueError, match="Unknown transcription provider"):
            create_transcriber(other)
