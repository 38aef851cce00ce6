"""Live transcription with faster-whisper.

Listens to the recorder's PCM frames, cuts them into fixed-duration chunks,
and transcribes each non-silent chunk in a worker thread. Chunks are
transcribed strictly in order so fragments reach the controller in the order
they were spoken. The WhisperModel is loaded lazily and cached at module level.
"""

import asyncio
import logging

import numpy as np
from faster_whisper import WhisperModel

from talkitout.core.exceptions import TranscriptionStartError
from talkitout.services.audio.buffer import AudioBuffer, is_silent
from talkitout.services.audio.recorder import WavRecorder
from talkitout.services.transcription.base import BaseLiveTranscriber, TextCallback

logger = logging.getLogger(__name__)

_model_cache: dict[tuple[str, str, str], WhisperModel] = {}


def _load_model(model_size: str, device: str, compute_type: str) -> WhisperModel:
    key = (model_size, device, compute_type)
    if key not in _model_cache:
        logger.info(
            "Loading Whisper model: %s (device=%s, compute=%s)",
            model_size,
            device,
            compute_type,
        )
        _model_cache[key] = WhisperModel(model_size, device=device, compute_type=compute_type)
    return _model_cache[key]


class WhisperLiveTranscriber(BaseLiveTranscriber):
    """Chunked live transcription over a ``WavRecorder``'s PCM stream.

    Args:
        source: Recorder whose fed frames are transcribed.
        model_size: Whisper model size (tiny, base, small, medium, large-v3).
        device: Computation device ("cpu" or "cuda").
        compute_type: CTranslate2 compute type ("int8", "float16", etc.).
        language: ISO 639-1 code, or None to auto-detect.
        chunk_seconds: Audio duration per transcription call.
    """

    def __init__(
        self,
        source: WavRecorder,
        model_size: str = "base",
        device: str = "cpu",
        compute_type: str = "int8",
        language: str | None = None,
        chunk_seconds: float = 3.0,
    ) -> None:
        self._source = source
        self._model_size = model_size
        self._device = device
        self._compute_type = compute_type
        self._language = language or None
        self._chunk_seconds = chunk_seconds
        self._model: WhisperModel | None = None
        self._buffer: AudioBuffer | None = None
        self._on_text: TextCallback | None = None
        self._queue: asyncio.Queue[np.ndarray | None] | None = None
        self._worker: asyncio.Task | None = None

    async def start(self, on_text: TextCallback) -> None:
        try:
            self._model = await asyncio.to_thread(
                _load_model, self._model_size, self._device, self._compute_type
            )
        except Exception as exc:
            raise TranscriptionStartError(f"Could not load Whisper model: {exc}") from exc

        self._on_text = on_text
        self._buffer = AudioBuffer(self._chunk_seconds, self._source.sample_rate)
        self._queue = asyncio.Queue()
        self._worker = asyncio.create_task(self._run())
        self._source.add_listener(self._on_pcm)

    def _on_pcm(self, pcm: bytes) -> None:
        if self._buffer is None or self._queue is None:
            return
        self._buffer.add(pcm)
        while (chunk := self._buffer.pop_chunk()) is not None:
            self._queue.put_nowait(chunk)

    async def stop(self) -> None:
        self._source.remove_listener(self._on_pcm)
        if self._queue is None:
            return

        if self._buffer is not None:
            remainder = self._buffer.flush()
            if remainder is not None:
                self._queue.put_nowait(remainder)
        self._queue.put_nowait(None)

        if self._worker is not None:
            await self._worker
        self._worker = None
        self._queue = None
        self._buffer = None
        self._on_text = None

    def _transcribe(self, audio: np.ndarray) -> str:
        """Run synchronous transcription (CPU-bound); call via asyncio.to_thread()."""
        segments, _info = self._model.transcribe(
            audio,
            language=self._language,
            beam_size=5,
            vad_filter=True,
        )
        return " ".join(seg.text.strip() for seg in segments if seg.text.strip())

    async def _run(self) -> None:
        while True:
            chunk = await self._queue.get()
            if chunk is None:
                return
            if is_silent(chunk):
                continue
            try:
                text = await asyncio.to_thread(self._transcribe, chunk)
            except Exception:
                logger.exception("Chunk transcription failed; continuing")
                continue
            if text and self._on_text is not None:
                self._on_text(text)
