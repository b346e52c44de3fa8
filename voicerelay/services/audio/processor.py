"""Audio encoding for assembled recordings.

Wraps concatenated PCM bytes in a container the relay accepts, using
soundfile (libsndfile) for the compressed OGG/Vorbis codec.
"""

import io

import numpy as np
import soundfile as sf

from voicerelay.core.models import AudioPayload

# audio_format -> (soundfile format, subtype, MIME type, upload filename)
_FORMATS = {
    "ogg": ("OGG", "VORBIS", "audio/ogg", "recording.ogg"),
    "wav": ("WAV", "PCM_16", "audio/wav", "recording.wav"),
}


class AudioProcessor:
    """Converts raw PCM bytes into an uploadable audio payload.

    Args:
        sample_rate: Audio sample rate in Hz (default: 16 kHz).
        channels: Number of interleaved channels (1 = mono).
        sample_width: Bytes per sample (2 = 16-bit signed PCM).
    """

    def __init__(self, sample_rate: int = 16000, channels: int = 1, sample_width: int = 2) -> None:
        self.sample_rate = sample_rate
        self.channels = channels
        self.sample_width = sample_width

    def pcm_to_ndarray(self, pcm_data: bytes) -> np.ndarray:
        """Convert 16-bit PCM bytes to an int16 array shaped ``(frames, channels)``.

        Raises:
            ValueError: If data length is not aligned to the frame size.
        """
        frame_size = self.sample_width * self.channels
        if len(pcm_data) % frame_size != 0:
            raise ValueError(
                f"PCM data length ({len(pcm_data)}) is not aligned to frame size ({frame_size})"
            )
        return np.frombuffer(pcm_data, dtype=np.int16).reshape(-1, self.channels)

    def encode(self, pcm_data: bytes, audio_format: str = "ogg") -> AudioPayload:
        """Encode PCM bytes as a complete audio file.

        Args:
            pcm_data: Concatenated 16-bit PCM chunks.
            audio_format: ``"ogg"`` (Vorbis) or ``"wav"``.

        Returns:
            AudioPayload with the encoded bytes, MIME type and filename.

        Raises:
            ValueError: If the format is unknown or pcm_data is empty/misaligned.
        """
        if audio_format not in _FORMATS:
            raise ValueError(f"Unsupported audio format: {audio_format}")
        if not pcm_data:
            raise ValueError("Cannot encode empty PCM data")

        sf_format, subtype, mime_type, filename = _FORMATS[audio_format]
        samples = self.pcm_to_ndarray(pcm_data)
        buffer = io.BytesIO()
        sf.write(buffer, samples, self.sample_rate, format=sf_format, subtype=subtype)
        return AudioPayload(data=buffer.getvalue(), mime_type=mime_type, filename=filename)
