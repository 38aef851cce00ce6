"""
Abstract base class for live transcription engines.

A live transcriber reports recognized text fragments, in order, while a
recording is running. The controller appends each fragment to its live
transcript buffer.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

TextCallback = Callable[[str], None]


class BaseLiveTranscriber(ABC):
    """Interface that every live transcription engine must implement."""

    @abstractmethod
    async def start(self, on_text: TextCallback) -> None:
        """Begin recognizing speech and report fragments to ``on_text``.

        Raises:
            TranscriptionStartError: If the engine cannot be started.
        """

    @abstractmethod
    async def stop(self) -> None:
        """Stop recognizing. Fragments still in flight are delivered before returning."""
