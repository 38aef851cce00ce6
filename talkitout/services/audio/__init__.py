"""
Audio module - capture interface, WAV recorder, and PCM buffering.
"""

from .base import BaseRecorder, PermissionStatus
from .buffer import AudioBuffer
from .recorder import WavRecorder

__all__ = ["AudioBuffer", "BaseRecorder", "PermissionStatus", "WavRecorder"]
