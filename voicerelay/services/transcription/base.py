"""
Abstract base class for upstream transcription providers.

The relay only ever talks to this interface, so the provider can be
swapped (or mocked in tests) without touching the request handler.
"""

from abc import ABC, abstractmethod

from voicerelay.services.ingestion.artifact import UploadArtifact


class BaseTranscriber(ABC):
    """Interface that every transcription provider must implement."""

    @abstractmethod
    async def transcribe(self, artifact: UploadArtifact) -> str:
        """Forward one buffered upload and return the transcript text.

        Args:
            artifact: The sealed upload artifact to send upstream.

        Returns:
            The transcript text.

        Raises:
            UpstreamTranscriptionError: If the upstream call fails or its
                response cannot be understood.
        """

    async def aclose(self) -> None:
        """Release network resources held by the provider."""
