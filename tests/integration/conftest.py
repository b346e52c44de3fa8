"""Integration test fixtures for VoiceRelay.

Builds the relay with ``create_app()`` and drives it in-process through
``httpx.ASGITransport``; the upstream provider is a mock unless a test
wires a real ``OpenAITranscriber`` to a mock transport.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from voicerelay.api.app import create_app


@pytest.fixture
def app(settings, mock_transcriber):
    """Create a fresh FastAPI application with the mock transcriber."""
    return create_app(settings, transcriber=mock_transcriber)


@pytest.fixture
async def async_client(app):
    """AsyncClient that returns 500 responses instead of re-raising app errors."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
