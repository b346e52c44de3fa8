"""Microphone capture as a lazy, finite sequence of timed PCM chunks.

A ``ChunkSource`` opens one ``ChunkCapture`` per recording session. The
capture produces chunks in arrival order while the device runs; once
``close()`` is called the sequence returned by ``chunks()`` ends after the
last buffered chunk, so it can be drained without blocking forever.
"""

import logging
import queue
from collections.abc import Iterator
from typing import Protocol

from voicerelay.core.exceptions import MicrophonePermissionError, MicrophoneUnavailableError

logger = logging.getLogger(__name__)

_PERMISSION_MARKERS = ("permission", "not allowed", "access denied", "unauthorized")


class ChunkCapture(Protocol):
    """A running capture for one recording session."""

    def chunks(self) -> Iterator[bytes]:
        """Yield captured chunks in order; finite once ``close()`` has been called."""
        ...

    def close(self) -> None:
        """Stop the underlying device. Idempotent."""
        ...


class ChunkSource(Protocol):
    """Something that can start a capture (a microphone, a test fixture...)."""

    def open(self) -> ChunkCapture:
        """Acquire the device and start producing chunks.

        Raises:
            MicrophonePermissionError: Access to the device was refused.
            MicrophoneUnavailableError: No working input device.
        """
        ...


class MicrophoneCapture:
    """A started ``sounddevice.InputStream`` feeding a chunk queue.

    The PortAudio callback thread only copies each block into a thread-safe
    queue; a ``None`` sentinel marks the end of the session.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[bytes | None] = queue.Queue()
        self._stream = None
        self._closed = False

    def callback(self, indata, frames, time_info, status) -> None:  # noqa: ANN001
        if status:
            logger.debug("Input stream status: %s", status)
        self._queue.put(indata.copy().tobytes())

    def attach(self, stream) -> None:  # noqa: ANN001
        self._stream = stream
        stream.start()

    def chunks(self) -> Iterator[bytes]:
        while True:
            chunk = self._queue.get()
            if chunk is None:
                return
            yield chunk

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            if self._stream is not None:
                self._stream.stop()
                self._stream.close()
        finally:
            self._queue.put(None)


class MicrophoneSource:
    """Default input device, opened fresh for every session.

    ``sounddevice`` is imported on first use because it needs the PortAudio
    system library, which headless hosts often lack.

    Args:
        sample_rate: Capture rate in Hz.
        channels: Number of input channels.
        chunk_interval: Seconds of audio per produced chunk.
    """

    def __init__(
        self, sample_rate: int = 16000, channels: int = 1, chunk_interval: float = 1.0
    ) -> None:
        self.sample_rate = sample_rate
        self.channels = channels
        self.chunk_interval = chunk_interval

    def open(self) -> MicrophoneCapture:
        try:
            import sounddevice as sd
        except OSError as exc:
            logger.error("PortAudio is not available: %s", exc)
            raise MicrophoneUnavailableError() from exc

        capture = MicrophoneCapture()
        try:
            stream = sd.InputStream(
                samplerate=self.sample_rate,
                channels=self.channels,
                dtype="int16",
                blocksize=int(self.sample_rate * self.chunk_interval),
                callback=capture.callback,
            )
            capture.attach(stream)
        except sd.PortAudioError as exc:
            logger.warning("Could not open microphone: %s", exc)
            if any(marker in str(exc).lower() for marker in _PERMISSION_MARKERS):
                raise MicrophonePermissionError() from exc
            raise MicrophoneUnavailableError() from exc
        except ValueError as exc:
            # sounddevice raises ValueError when no matching input device exists
            logger.warning("Invalid microphone configuration: %s", exc)
            raise MicrophoneUnavailableError() from exc
        return capture
