"""Streaming multipart ingestion for audio uploads.

Feeds the raw request body through ``python_multipart.MultipartParser`` as
it arrives. The first file part is validated against the MIME allow-list
from its headers (before any byte is stored), then buffered into an
``UploadArtifact`` while the size limit is enforced byte by byte.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header
from starlette.requests import ClientDisconnect

from voicerelay.core.config import Settings
from voicerelay.core.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    NoAudioFileError,
    UploadParseError,
)
from voicerelay.services.ingestion.artifact import UploadArtifact

logger = logging.getLogger(__name__)


def normalize_mime_type(raw: bytes | str | None) -> str:
    """Return the bare, lower-cased media type (``audio/webm;codecs=opus`` -> ``audio/webm``)."""
    media_type, _params = parse_options_header(raw or b"")
    return media_type.decode("latin-1").strip().lower()


class MultipartAudioReader:
    """Parses one multipart/form-data body into a single UploadArtifact.

    Parser callbacks only record events; the events are processed after each
    ``write()`` so validation errors surface from ``read()`` and file writes
    can be pushed to a worker thread.

    Args:
        content_type: The request's ``Content-Type`` header.
        max_bytes: Size limit for the audio field.
        allowed_mime_types: Accepted media types for the audio field.
        upload_dir: Directory for the temp file (None = system temp dir).

    Raises:
        UploadParseError: If the content type is not multipart or lacks a boundary.
    """

    def __init__(
        self,
        content_type: str,
        max_bytes: int,
        allowed_mime_types: tuple[str, ...],
        upload_dir: Path | None = None,
    ) -> None:
        media_type, params = parse_options_header(content_type or b"")
        boundary = params.get(b"boundary")
        if media_type != b"multipart/form-data":
            raise UploadParseError(f"Unsupported content type: {content_type or 'none'}")
        if not boundary:
            raise UploadParseError("Multipart: Boundary not found")

        self._max_bytes = max_bytes
        self._allowed = {m.lower() for m in allowed_mime_types}
        self._upload_dir = upload_dir

        self.artifact: UploadArtifact | None = None
        self._events: list[tuple[str, bytes]] = []
        self._headers: dict[bytes, bytes] = {}
        self._header_field = b""
        self._header_value = b""
        self._capturing = False
        self._complete = False

        self._parser = MultipartParser(
            boundary,
            callbacks={
                "on_part_begin": lambda: self._events.append(("part_begin", b"")),
                "on_header_field": self._data_event("header_field"),
                "on_header_value": self._data_event("header_value"),
                "on_header_end": lambda: self._events.append(("header_end", b"")),
                "on_headers_finished": lambda: self._events.append(("headers_finished", b"")),
                "on_part_data": self._data_event("part_data"),
                "on_part_end": lambda: self._events.append(("part_end", b"")),
                "on_end": lambda: self._events.append(("end", b"")),
            },
        )

    def _data_event(self, kind: str):
        def callback(data: bytes, start: int, end: int) -> None:
            self._events.append((kind, data[start:end]))

        return callback

    async def read(self, stream: AsyncIterator[bytes]) -> UploadArtifact:
        """Consume the body stream and return the buffered audio artifact.

        Raises:
            InvalidFileTypeError: The file part's type is not allow-listed.
            FileTooLargeError: The file part exceeds ``max_bytes``.
            NoAudioFileError: The body holds no file part.
            UploadParseError: The body is not valid multipart data.
        """
        try:
            async for chunk in stream:
                if not chunk:
                    continue
                self._parser.write(chunk)
                await self._process_events()
            self._parser.finalize()
            await self._process_events()
        except MultipartParseError as exc:
            raise UploadParseError(str(exc)) from exc
        except ClientDisconnect as exc:
            raise UploadParseError("Client disconnected during upload") from exc

        if not self._complete:
            raise UploadParseError("Unexpected end of multipart body")
        if self.artifact is None:
            raise NoAudioFileError()
        self.artifact.seal()
        return self.artifact

    def discard(self) -> None:
        """Remove whatever was buffered, complete or not."""
        if self.artifact is not None:
            self.artifact.cleanup()

    async def _process_events(self) -> None:
        events, self._events = self._events, []
        for kind, data in events:
            if kind == "part_begin":
                self._headers = {}
                self._header_field = b""
                self._header_value = b""
                self._capturing = False
            elif kind == "header_field":
                self._header_field += data
            elif kind == "header_value":
                self._header_value += data
            elif kind == "header_end":
                self._headers[self._header_field.lower()] = self._header_value
                self._header_field = b""
                self._header_value = b""
            elif kind == "headers_finished":
                self._begin_part()
            elif kind == "part_data":
                if self._capturing:
                    await self._append(data)
            elif kind == "part_end":
                if self._capturing:
                    self._capturing = False
                    self.artifact.seal()
            elif kind == "end":
                self._complete = True

    def _begin_part(self) -> None:
        _disposition, options = parse_options_header(self._headers.get(b"content-disposition", b""))
        if b"filename" not in options:
            # Plain form field
            return
        if self.artifact is not None:
            logger.debug("Ignoring additional file part %r", options.get(b"name"))
            return

        mime_type = normalize_mime_type(self._headers.get(b"content-type"))
        if mime_type not in self._allowed:
            logger.warning("Rejected upload with type %r", mime_type or "none")
            raise InvalidFileTypeError(mime_type)

        filename = options[b"filename"].decode("utf-8", errors="replace") or None
        self.artifact = UploadArtifact(mime_type, filename, self._upload_dir)
        self._capturing = True

    async def _append(self, data: bytes) -> None:
        if self.artifact.size + len(data) > self._max_bytes:
            logger.warning(
                "Rejected upload %r: exceeds %d bytes", self.artifact.filename, self._max_bytes
            )
            raise FileTooLargeError(self._max_bytes)
        await asyncio.to_thread(self.artifact.write, data)


@asynccontextmanager
async def receive_upload(
    content_type: str,
    stream: AsyncIterator[bytes],
    settings: Settings,
) -> AsyncIterator[UploadArtifact]:
    """Buffer the uploaded audio for the duration of the ``async with`` block.

    The artifact is deleted when the block exits, whether ingestion failed,
    the body raised, or everything succeeded.

    Args:
        content_type: The request's ``Content-Type`` header.
        stream: The raw request body, e.g. ``request.stream()``.
        settings: Relay settings providing the size limit, allow-list and upload dir.

    Yields:
        UploadArtifact: The sealed temp file holding the audio bytes.
    """
    reader = MultipartAudioReader(
        content_type,
        max_bytes=settings.max_upload_bytes,
        allowed_mime_types=settings.allowed_mime_types,
        upload_dir=settings.upload_dir,
    )
    try:
        artifact = await reader.read(stream)
        logger.info(
            "Received upload %r (%s, %d bytes)",
            artifact.filename,
            artifact.mime_type,
            artifact.size,
        )
        yield artifact
    finally:
        reader.discard()
