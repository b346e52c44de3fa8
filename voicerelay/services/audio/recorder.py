"""Recorder state machine.

States: idle -> recording -> processing -> idle

One session at a time: ``start()`` is rejected unless the recorder is idle,
so a new recording can never overlap one that is still capturing or whose
upload is still in flight.
"""

import logging
from collections.abc import Iterable

from voicerelay.core.exceptions import RecorderBusyError, RecorderError, SubmissionError
from voicerelay.core.models import RecorderStatus, TranscriptEntry
from voicerelay.services.audio.capture import ChunkCapture, ChunkSource
from voicerelay.services.audio.processor import AudioProcessor
from voicerelay.services.history import TranscriptHistory
from voicerelay.ui.api_client import APIError, RelayClient

logger = logging.getLogger(__name__)


def assemble_chunks(chunks: Iterable[bytes]) -> bytes:
    """Concatenate chunks into one payload, preserving their order."""
    return b"".join(chunks)


class RecordingSession:
    """Chunks captured for one start/stop cycle."""

    def __init__(self, capture: ChunkCapture) -> None:
        self._capture = capture
        self.chunks: list[bytes] = []

    def finish(self) -> list[bytes]:
        """Stop the device and drain every chunk it produced, in arrival order."""
        self._capture.close()
        for chunk in self._capture.chunks():
            if chunk:
                self.chunks.append(chunk)
        return self.chunks

    def abort(self) -> None:
        self._capture.close()
        self.chunks.clear()


class Recorder:
    """Captures audio, submits it to the relay and records the transcripts.

    Args:
        source: Where audio chunks come from (microphone or a test double).
        client: HTTP client for the relay.
        history: Transcript history to append to (a new one by default).
        processor: Encoder for the assembled PCM.
        audio_format: Upload container, ``"ogg"`` or ``"wav"``.
    """

    def __init__(
        self,
        source: ChunkSource,
        client: RelayClient,
        history: TranscriptHistory | None = None,
        processor: AudioProcessor | None = None,
        audio_format: str = "ogg",
    ) -> None:
        self._source = source
        self._client = client
        self.history = history if history is not None else TranscriptHistory()
        self._processor = processor or AudioProcessor()
        self._audio_format = audio_format
        self._status = RecorderStatus.idle
        self._session: RecordingSession | None = None
        self.error: str | None = None

    @property
    def status(self) -> RecorderStatus:
        return self._status

    @property
    def is_recording(self) -> bool:
        return self._status is RecorderStatus.recording

    @property
    def is_processing(self) -> bool:
        return self._status is RecorderStatus.processing

    def start(self) -> None:
        """Acquire the microphone and begin a new session.

        Raises:
            RecorderBusyError: A session is already recording or processing.
            MicrophonePermissionError: Microphone access was refused.
            MicrophoneUnavailableError: No usable input device.
        """
        if self._status is not RecorderStatus.idle:
            raise RecorderBusyError(self._status.value)

        try:
            capture = self._source.open()
        except RecorderError as exc:
            self.error = exc.message
            raise

        self._session = RecordingSession(capture)
        self._status = RecorderStatus.recording
        self.error = None
        logger.info("Recording started")

    async def stop(self) -> TranscriptEntry | None:
        """Finish the session, upload the recording and store the transcript.

        Returns None without doing anything unless a session is recording.

        Returns:
            The new history entry.

        Raises:
            SubmissionError: Nothing was captured or the relay call failed;
                the recording is discarded and no entry is created.
        """
        if self._status is not RecorderStatus.recording:
            return None

        session, self._session = self._session, None
        try:
            pcm = assemble_chunks(session.finish())
            self._status = RecorderStatus.processing
            logger.info("Recording stopped (%d chunks, %d bytes)", len(session.chunks), len(pcm))
            if not pcm:
                raise SubmissionError("No audio captured")

            payload = self._processor.encode(pcm, self._audio_format)
            try:
                result = await self._client.transcribe(payload)
            except APIError as exc:
                raise SubmissionError(exc.message) from exc

            entry = self.history.add(result.get("text", ""))
            self.error = None
            return entry
        except RecorderError as exc:
            self.error = f"Error processing recording: {exc.message}"
            logger.warning("Recording discarded: %s", exc.message)
            raise
        finally:
            self._status = RecorderStatus.idle

    def cancel(self) -> None:
        """Drop the current recording without submitting it."""
        if self._session is not None:
            self._session.abort()
            self._session = None
        if self._status is RecorderStatus.recording:
            self._status = RecorderStatus.idle

    def delete(self, entry_id: int) -> bool:
        return self.history.delete(entry_id)

    def clear(self) -> None:
        self.history.clear()
