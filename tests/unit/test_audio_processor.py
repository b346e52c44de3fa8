"""Tests for AudioProcessor encoding."""

import io

import numpy as np
import pytest
import soundfile as sf

from voicerelay.services.audio import AudioProcessor, assemble_chunks


@pytest.fixture
def processor():
    return AudioProcessor(sample_rate=16000, channels=1)


def _tone(frames: int = 1600) -> bytes:
    t = np.arange(frames) / 16000
    return (np.sin(2 * np.pi * 440 * t) * 8000).astype(np.int16).tobytes()


def test_wav_preserves_samples(processor):
    pcm = _tone()

    payload = processor.encode(pcm, "wav")

    assert payload.mime_type == "audio/wav"
    assert payload.filename == "recording.wav"
    data, rate = sf.read(io.BytesIO(payload.data), dtype="int16")
    assert rate == 16000
    assert data.tobytes() == pcm


def test_wav_of_assembled_chunks_matches_whole(processor):
    pcm = _tone(3200)
    chunks = [pcm[i : i + 640] for i in range(0, len(pcm), 640)]

    payload = processor.encode(assemble_chunks(chunks), "wav")

    data, _ = sf.read(io.BytesIO(payload.data), dtype="int16")
    assert data.tobytes() == pcm


def test_ogg_payload(processor):
    payload = processor.encode(_tone(), "ogg")

    assert payload.mime_type == "audio/ogg"
    assert payload.filename == "recording.ogg"
    assert payload.data[:4] == b"OggS"


def test_stereo_shape():
    processor = AudioProcessor(channels=2)
    samples = processor.pcm_to_ndarray(b"\x00\x00\x01\x00" * 10)
    assert samples.shape == (10, 2)


def test_empty_pcm_rejected(processor):
    with pytest.raises(ValueError, match="empty"):
        processor.encode(b"", "wav")


def test_misaligned_pcm_rejected(processor):
    with pytest.raises(ValueError, match="not aligned"):
        processor.encode(b"\x00\x01\x02", "wav")


def test_unknown_format_rejected(processor):
    with pytest.raises(ValueError, match="Unsupported audio format"):
        processor.encode(_tone(), "flac")
