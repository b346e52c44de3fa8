"""
Audio module - microphone capture, encoding and the recorder state machine.
"""

from .capture import ChunkCapture, ChunkSource, MicrophoneSource
from .processor import AudioProcessor
from .recorder import Recorder, RecordingSession, assemble_chunks

__all__ = [
    "AudioProcessor",
    "ChunkCapture",
    "ChunkSource",
    "MicrophoneSource",
    "Recorder",
    "RecordingSession",
    "assemble_chunks",
]
