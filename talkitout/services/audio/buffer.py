"""PCM buffering for live transcription.

Collects 16-bit mono PCM bytes and hands out back-to-back, non-overlapping
chunks of a fixed duration as float32 arrays. Chunks do not overlap so the
text recognized from consecutive chunks can be appended without duplicates.
"""

import numpy as np

SAMPLE_WIDTH = 2  # 16-bit signed PCM
MIN_FLUSH_SECONDS = 0.5


def pcm16_to_float32(pcm: bytes) -> np.ndarray:
    """Convert 16-bit signed PCM bytes to float32 samples in [-1.0, 1.0].

    Raises:
        ValueError: If ``pcm`` is not a whole number of samples.
    """
    if len(pcm) % SAMPLE_WIDTH != 0:
        raise ValueError(f"PCM length {len(pcm)} is not a multiple of {SAMPLE_WIDTH}")
    return np.frombuffer(pcm, dtype=np.int16).astype(np.float32) / 32768.0


def is_silent(samples: np.ndarray, threshold: float = 0.01) -> bool:
    """True if the RMS energy of ``samples`` is below ``threshold``."""
    if samples.size == 0:
        return True
    return float(np.sqrt(np.mean(samples**2))) < threshold


class AudioBuffer:
    """Accumulates PCM bytes and yields fixed-duration chunks.

    Args:
        chunk_seconds: Duration of each chunk.
        sample_rate: Samples per second of the incoming PCM.
    """

    def __init__(self, chunk_seconds: float = 3.0, sample_rate: int = 16000) -> None:
        self._sample_rate = sample_rate
        self._chunk_bytes = int(chunk_seconds * sample_rate) * SAMPLE_WIDTH
        self._pending = bytearray()

    @property
    def buffered_seconds(self) -> float:
        return len(self._pending) / (self._sample_rate * SAMPLE_WIDTH)

    def add(self, pcm: bytes) -> None:
        self._pending.extend(pcm)

    def pop_chunk(self) -> np.ndarray | None:
        """Remove and return one full chunk, or None if not enough audio yet."""
        if len(self._pending) < self._chunk_bytes:
            return None
        chunk = bytes(self._pending[: self._chunk_bytes])
        del self._pending[: self._chunk_bytes]
        return pcm16_to_float32(chunk)

    def flush(self) -> np.ndarray | None:
        """Return whatever remains (aligned to whole samples), or None if too short."""
        usable = len(self._pending) - (len(self._pending) % SAMPLE_WIDTH)
        if usable < int(MIN_FLUSH_SECONDS * self._sample_rate) * SAMPLE_WIDTH:
            self._pending.clear()
            return None
        chunk = bytes(self._pending[:usable])
        self._pending.clear()
        return pcm16_to_float32(chunk)

    def clear(self) -> None:
        self._pending.clear()
