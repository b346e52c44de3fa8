"""
Transcription module - upstream speech-to-text abstraction layer.

Factory function for creating transcriber instances based on provider configuration.
"""

from voicerelay.core.config import Settings

from .base import BaseTranscriber

__all__ = ["BaseTranscriber", "create_transcriber"]


def create_transcriber(settings: Settings, **kwargs) -> BaseTranscriber:
    """
    Factory function to create a transcriber based on ``settings.transcription_provider``.

    Args:
        settings: Relay settings
        **kwargs: Provider-specific configuration

    Returns:
        BaseTranscriber implementation instance

    Raises:
        ValueError: If provider is unknown
    """
    provider = settings.transcription_provider
    if provider == "openai":
        from .openai import OpenAITranscriber
        return OpenAITranscriber(settings, **kwargs)
    else:
        raise ValueError(f"Unknown transcription provider: {provider}")
