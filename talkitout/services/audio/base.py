"""
Abstract base class for microphone capture.

The recording controller drives capture only through this interface, so the
platform audio stack can be swapped (or faked in tests).
"""

from abc import ABC, abstractmethod
from enum import StrEnum
from pathlib import Path


class PermissionStatus(StrEnum):
    """Microphone permission as reported by the platform."""

    granted = "granted"
    denied = "denied"
    undetermined = "undetermined"


class BaseRecorder(ABC):
    """Interface that every audio recorder must implement."""

    file_extension: str = "wav"

    @abstractmethod
    def permission_status(self) -> PermissionStatus:
        """Return the current microphone permission."""

    @abstractmethod
    async def request_permission(self) -> bool:
        """Ask for microphone access. Returns True if granted."""

    @abstractmethod
    async def configure(self) -> None:
        """Prepare the audio session.

        Raises:
            CaptureConfigurationError: If the session cannot be configured.
        """

    @abstractmethod
    async def start(self, destination: Path) -> None:
        """Begin writing captured audio to ``destination``.

        Raises:
            CaptureConfigurationError: If the recorder cannot be started.
        """

    @abstractmethod
    async def stop(self) -> Path | None:
        """Stop capturing. Returns the recorded file, or None if nothing was recording."""
