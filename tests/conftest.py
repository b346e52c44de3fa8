"""Shared pytest fixtures for the VoiceRelay test suite.

Provides relay settings pointing at a per-test upload directory, a mock
upstream transcriber, and helpers for building multipart bodies by hand.
"""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from voicerelay.core.config import Settings
from voicerelay.services.transcription import BaseTranscriber

BOUNDARY = "voicerelay-test-boundary"


def build_multipart(parts: list[tuple], boundary: str = BOUNDARY) -> bytes:
    """Encode ``(name, filename, content_type, data)`` tuples as multipart/form-data.

    ``filename`` / ``content_type`` may be None for plain text fields.
    """
    chunks = []
    for name, filename, content_type, data in parts:
        disposition = f'form-data; name="{name}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'
        head = f"--{boundary}\r\nContent-Disposition: {disposition}\r\n"
        if content_type is not None:
            head += f"Content-Type: {content_type}\r\n"
        chunks.append(head.encode() + b"\r\n" + data + b"\r\n")
    chunks.append(f"--{boundary}--\r\n".encode())
    return b"".join(chunks)


def leftover_files(directory: Path) -> list[Path]:
    """Files still present in ``directory`` (empty when it was never created)."""
    if not directory.exists():
        return []
    return list(directory.iterdir())


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def settings(upload_dir):
    """Relay settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        openai_api_key="sk-test",
        openai_base_url="https://upstream.test/v1",
        frontend_url="https://voice.example.com",
        upload_dir=upload_dir,
    )


# ---------------------------------------------------------------------------
# Upstream fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_transcriber():
    """Create a mock transcription provider.

    Returns:
        AsyncMock: A mock implementing BaseTranscriber whose ``transcribe``
        returns "hello world".
    """
    transcriber = AsyncMock(spec=BaseTranscriber)
    transcriber.transcribe.return_value = "hello world"
    return transcriber


# ---------------------------------------------------------------------------
# Helper fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_multipart():
    """Return the ``build_multipart`` helper."""
    return build_multipart


@pytest.fixture
def leftovers(upload_dir):
    """Return a callable listing files left in the upload directory."""
    return lambda: leftover_files(upload_dir)
