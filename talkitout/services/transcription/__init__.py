"""
Transcription module - live speech-to-text abstraction layer.

Factory function for creating live transcribers based on provider configuration.
"""

from .base import BaseLiveTranscriber

__all__ = ["BaseLiveTranscriber", "create_transcriber"]


def create_transcriber(provider: str, **kwargs) -> BaseLiveTranscriber:
    """
    Factory function to create a live transcriber based on provider.

    Args:
        provider: Transcriber name ("whisper")
        **kwargs: Provider-specific configuration

    Returns:
        BaseLiveTranscriber implementation instance

    Raises:
        ValueError: If provider is unknown
    """
    if provider == "whisper" or provider == "local":
        from .whisper import WhisperLiveTranscriber

        return WhisperLiveTranscriber(**kwargs)
    else:
        raise ValueError(f"Unknown transcription provider: {provider}")
