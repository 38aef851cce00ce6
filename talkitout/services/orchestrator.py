"""Recording session controller.

Coordinates one user-initiated recording at a time: microphone capture and
live transcription while recording, then, on stop, topic classification and
upload of the recording as two independent background tasks. A successful
upload appends an audio entry to the collection and advances the streak.

State machine: ``Idle -> Recording -> Idle``. ``stop()`` returns as soon as
both tails are dispatched; ``drain()`` awaits them.

Usage::

    controller = RecordingSessionController(
        recorder, transcriber, classifier, uploader, entries, StreakTracker()
    )
    await controller.start()
    ...
    await controller.stop()
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from datetime import UTC, datetime
from pathlib import Path
from uuid import uuid4

from talkitout.core.exceptions import (
    NoActiveRecordingError,
    PermissionDeniedError,
    RecordingAlreadyActiveError,
    UploadError,
)
from talkitout.core.models import (
    AudioEntry,
    PendingRetryResponse,
    RecordingStateResponse,
    SessionEvent,
    SessionEventType,
)
from talkitout.services.audio.base import BaseRecorder, PermissionStatus
from talkitout.services.classification.classifier import TopicClassifier
from talkitout.services.journal.collection import EntryCollection
from talkitout.services.segmenter import segment
from talkitout.services.storage.database import get_session
from talkitout.services.storage.repository import JournalRepository
from talkitout.services.storage.uploader import UploadClient
from talkitout.services.streak import StreakTracker
from talkitout.services.transcription.base import BaseLiveTranscriber

logger = logging.getLogger(__name__)

RECORDINGS_PREFIX = "recordings"

SessionListener = Callable[[SessionEvent], None]


class RecordingSessionController:
    """Drives the record -> transcribe -> classify/upload -> save pipeline.

    Args:
        recorder: Microphone capture.
        transcriber: Live speech-to-text engine.
        classifier: Topic/prompt classifier (never raises).
        uploader: Upload client for the finished recording.
        entries: Collection that receives saved audio entries.
        streak: Streak state advanced on every saved entry.
        recordings_dir: Local directory for in-progress recordings.
        persist_failed_uploads: Keep failed uploads in the local database
            so ``retry_pending_uploads()`` can save them later.
        clock: Source of entry timestamps.
    """

    def __init__(
        self,
        recorder: BaseRecorder,
        transcriber: BaseLiveTranscriber,
        classifier: TopicClassifier,
        uploader: UploadClient,
        entries: EntryCollection,
        streak: StreakTracker | None = None,
        recordings_dir: str | Path = "data/recordings",
        persist_failed_uploads: bool = False,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._recorder = recorder
        self._transcriber = transcriber
        self._classifier = classifier
        self._uploader = uploader
        self._entries = entries
        self._streak = streak or StreakTracker()
        self._recordings_dir = Path(recordings_dir)
        self._persist_failed_uploads = persist_failed_uploads
        self._clock = clock

        self.is_recording = False
        self.live_transcript = ""
        self.last_recording_path: Path | None = None
        self.topic: str | None = None
        self.prompt: str | None = None

        self._session_id = 0
        self._tasks: set[asyncio.Task] = set()
        self._listeners: list[SessionListener] = []
        self._retry_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def session_id(self) -> int:
        return self._session_id

    @property
    def lines(self) -> list[str]:
        """Live transcript split into display lines."""
        return segment(self.live_transcript)

    @property
    def streak_count(self) -> int:
        return self._streak.count

    @property
    def last_entry_date(self) -> datetime | None:
        return self._streak.last_entry_date

    def state(self) -> RecordingStateResponse:
        return RecordingStateResponse(
            is_recording=self.is_recording,
            session_id=self._session_id,
            lines=self.lines,
            topic=self.topic,
            prompt=self.prompt,
            streak_count=self.streak_count,
            last_entry_date=self.last_entry_date,
        )

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener`` for session events; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(
        self,
        event_type: SessionEventType,
        session_id: int | None = None,
        **data,
    ) -> None:
        event = SessionEvent(
            type=event_type,
            session_id=self._session_id if session_id is None else session_id,
            data=data,
        )
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.warning("Session listener failed for %s event (non-fatal)", event_type)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def _ensure_permission(self) -> bool:
        status = self._recorder.permission_status()
        if status is PermissionStatus.undetermined:
            return await self._recorder.request_permission()
        return status is PermissionStatus.granted

    async def start(self) -> int:
        """Idle -> Recording. Returns the new session id.

        Raises:
            RecordingAlreadyActiveError: If a recording is in progress.
            PermissionDeniedError: If microphone access is denied.
        """
        if self.is_recording:
            raise RecordingAlreadyActiveError()

        if not await self._ensure_permission():
            error = PermissionDeniedError()
            logger.warning("Microphone permission denied; recording not started")
            self._publish(SessionEventType.permission_denied, detail=error.detail)
            raise error

        self._session_id += 1
        self.live_transcript = ""
        self.topic = None
        self.prompt = None

        try:
            await self._recorder.configure()
        except Exception as exc:
            logger.warning("Failed to set up audio session (continuing): %s", exc)

        destination = self._recordings_dir / f"{uuid4()}.{self._recorder.file_extension}"
        try:
            await self._recorder.start(destination)
            self.last_recording_path = destination
        except Exception as exc:
            logger.warning("Could not start audio capture (continuing without audio): %s", exc)
            self.last_recording_path = None

        self.is_recording = True

        try:
            await self._transcriber.start(self._on_transcribed)
        except Exception as exc:
            logger.warning("Live transcription unavailable for this session: %s", exc)

        logger.info("Recording session %s started", self._session_id)
        self._publish(SessionEventType.started)
        return self._session_id

    def _on_transcribed(self, fragment: str) -> None:
        if not self.is_recording or not fragment.strip():
            return
        if self.live_transcript:
            self.live_transcript += " "
        self.live_transcript += fragment.strip()
        self._publish(SessionEventType.transcript, lines=self.lines)

    async def stop(self) -> int:
        """Recording -> Idle. Returns the id of the stopped session.

        Classification and upload are dispatched, not awaited.

        Raises:
            NoActiveRecordingError: If no recording is in progress.
        """
        if not self.is_recording:
            raise NoActiveRecordingError()

        session_id = self._session_id
        try:
            await self._recorder.stop()
        except Exception as exc:
            logger.warning("Failed to stop audio capture cleanly: %s", exc)
        try:
            await self._transcriber.stop()
        except Exception as exc:
            logger.warning("Failed to stop live transcription cleanly: %s", exc)
        self.is_recording = False

        transcript = self.live_transcript
        local_path = self.last_recording_path
        self.last_recording_path = None

        if not transcript.strip():
            self.live_transcript = ""
            self.topic = None
            self.prompt = None
            logger.info("Recording session %s stopped with an empty transcript", session_id)
            self._publish(SessionEventType.stopped, session_id, transcript="", dispatched=False)
            return session_id

        self._dispatch(self._classify(session_id, transcript))
        self._dispatch(self._save_recording(session_id, transcript, local_path))
        self.live_transcript = ""

        logger.info("Recording session %s stopped; classification and upload dispatched", session_id)
        self._publish(SessionEventType.stopped, session_id, transcript=transcript, dispatched=True)
        return session_id

    # ------------------------------------------------------------------
    # Background tails
    # ------------------------------------------------------------------

    def _dispatch(self, coro: Coroutine) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for every dispatched classification and upload to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _classify(self, session_id: int, transcript: str) -> None:
        try:
            result = await self._classifier.classify(transcript)
        except Exception:
            logger.exception("Classification crashed for session %s", session_id)
            return

        if session_id != self._session_id:
            logger.debug(
                "Discarding classification for session %s (current is %s)",
                session_id,
                self._session_id,
            )
            return

        self.topic = result.display_topic
        self.prompt = result.prompt
        self._publish(
            SessionEventType.classification, session_id, topic=self.topic, prompt=self.prompt
        )

    def _save_entry(self, transcript: str, audio_url: str, date: datetime) -> AudioEntry:
        entry = AudioEntry(date=date, transcript=transcript, audio_url=audio_url)
        self._entries.append(entry)
        self._streak.record(entry.date)
        logger.info("Saved audio entry %s (streak %s)", entry.id, self.streak_count)
        return entry

    async def _save_recording(
        self,
        session_id: int,
        transcript: str,
        local_path: Path | None,
    ) -> None:
        destination = f"{RECORDINGS_PREFIX}/{uuid4()}.{self._recorder.file_extension}"
        try:
            if local_path is None:
                raise UploadError(detail="No local recording is available to upload")
            locator = await self._uploader.upload(local_path, destination)
        except UploadError as exc:
            await self._handle_upload_failure(session_id, transcript, local_path, destination, exc)
            return
        except Exception:
            logger.exception("Upload crashed for session %s", session_id)
            return

        entry = self._save_entry(transcript, locator, self._clock())
        self._publish(
            SessionEventType.entry_saved,
            session_id,
            entry=entry.model_dump(mode="json"),
            streak_count=self.streak_count,
        )

    async def _handle_upload_failure(
        self,
        session_id: int,
        transcript: str,
        local_path: Path | None,
        destination: str,
        error: UploadError,
    ) -> None:
        logger.warning("Upload failed for session %s: %s", session_id, error.detail)
        pending_id: int | None = None

        if self._persist_failed_uploads and local_path is not None:
            try:
                async with get_session() as session:
                    pending = await JournalRepository(session).add_pending_upload(
                        local_path=str(local_path),
                        destination_path=destination,
                        transcript=transcript,
                        recorded_at=self._clock(),
                        last_error=error.detail,
                    )
                    pending_id = pending.id
                logger.info("Kept session %s as pending upload %s", session_id, pending_id)
            except Exception:
                logger.exception("Failed to persist pending upload for session %s", session_id)

        self._publish(
            SessionEventType.upload_failed,
            session_id,
            detail=error.detail,
            pending_id=pending_id,
        )

    async def retry_pending_uploads(self) -> PendingRetryResponse:
        """Attempt every persisted pending upload once.

        Successful uploads become audio entries dated at their original
        recording time; failures stay pending with an incremented attempt count.
        Overlapping calls run one after the other, and a row is only saved by
        the call that deletes it.
        """
        async with self._retry_lock:
            return await self._retry_pending_uploads()

    async def _retry_pending_uploads(self) -> PendingRetryResponse:
        async with get_session() as session:
            pending_uploads = await JournalRepository(session).list_pending_uploads()

        result = PendingRetryResponse()
        for pending in pending_uploads:
            try:
                locator = await self._uploader.upload(pending.local_path, pending.destination_path)
            except UploadError as exc:
                async with get_session() as session:
                    await JournalRepository(session).record_failed_attempt(pending.id, exc.detail)
                result.failed += 1
                continue

            async with get_session() as session:
                claimed = await JournalRepository(session).delete_pending_upload(pending.id)
            if not claimed:
                logger.info("Pending upload %s was already saved; skipping", pending.id)
                continue

            recorded_at = pending.recorded_at
            if recorded_at.tzinfo is None:
                recorded_at = recorded_at.replace(tzinfo=UTC)
            entry = self._save_entry(pending.transcript, locator, recorded_at)
            result.saved += 1
            self._publish(
                SessionEventType.entry_saved,
                entry=entry.model_dump(mode="json"),
                streak_count=self.streak_count,
                pending_id=pending.id,
            )

        if pending_uploads:
            logger.info(
                "Pending uploads retried: %s saved, %s still pending", result.saved, result.failed
            )
        return result
