"""
Ingestion module - turns an inbound multipart upload into a temp artifact.
"""

from .artifact import UploadArtifact
from .multipart import MultipartAudioReader, receive_upload

__all__ = ["MultipartAudioReader", "UploadArtifact", "receive_upload"]
