"""WAV recorder fed with raw PCM frames.

The microphone lives on the client device; captured frames arrive as raw
16-bit mono PCM (e.g. over the record WebSocket) and are passed to
``feed()``. The recorder writes them to a WAV file and forwards each frame to
registered listeners such as the live transcriber.
"""

import logging
import wave
from collections.abc import Callable
from pathlib import Path

from talkitout.core.exceptions import CaptureConfigurationError
from talkitout.services.audio.base import BaseRecorder, PermissionStatus

logger = logging.getLogger(__name__)

PcmListener = Callable[[bytes], None]


class WavRecorder(BaseRecorder):
    """Writes fed PCM frames to a 16-bit mono WAV file.

    Args:
        sample_rate: Sample rate of the incoming PCM.
        permission: Initial microphone permission.
    """

    file_extension = "wav"

    def __init__(
        self,
        sample_rate: int = 16000,
        permission: PermissionStatus = PermissionStatus.undetermined,
    ) -> None:
        self.sample_rate = sample_rate
        self._permission = permission
        self._writer: wave.Wave_write | None = None
        self._destination: Path | None = None
        self._listeners: list[PcmListener] = []
        self._frames_written = 0

    @property
    def is_recording(self) -> bool:
        return self._writer is not None

    @property
    def frames_written(self) -> int:
        return self._frames_written

    def permission_status(self) -> PermissionStatus:
        return self._permission

    async def request_permission(self) -> bool:
        # Frames only arrive once the client has opened its microphone, so an
        # undetermined permission is granted on request.
        if self._permission is PermissionStatus.undetermined:
            self._permission = PermissionStatus.granted
        return self._permission is PermissionStatus.granted

    async def configure(self) -> None:
        if self.sample_rate <= 0:
            raise CaptureConfigurationError(f"Invalid sample rate: {self.sample_rate}")

    async def start(self, destination: Path) -> None:
        if self._writer is not None:
            raise CaptureConfigurationError("Recorder is already running")
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            writer = wave.open(str(destination), "wb")
            writer.setnchannels(1)
            writer.setsampwidth(2)
            writer.setframerate(self.sample_rate)
        except (OSError, wave.Error) as exc:
            raise CaptureConfigurationError(f"Could not start recording: {exc}") from exc

        self._writer = writer
        self._destination = destination
        self._frames_written = 0
        logger.info("Recording to %s", destination)

    def feed(self, pcm: bytes) -> None:
        """Write a PCM frame and forward it to listeners. Ignored when stopped."""
        if self._writer is None or not pcm:
            return
        self._writer.writeframes(pcm)
        self._frames_written += len(pcm) // 2
        for listener in list(self._listeners):
            try:
                listener(pcm)
            except Exception:
                logger.warning("PCM listener failed (non-fatal)")

    def add_listener(self, listener: PcmListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: PcmListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def stop(self) -> Path | None:
        if self._writer is None:
            return None
        self._writer.close()
        destination = self._destination
        self._writer = None
        self._destination = None
        logger.info(
            "Recording stopped: %s (%.1fs)",
            destination,
            self._frames_written / self.sample_rate,
        )
        return destination
