"""
Service wiring for the API layer.

``build_services()`` constructs every client once from ``Settings`` and the
lifespan stores the result on ``app.state.services``. Route handlers obtain
it through the ``get_services`` dependency, so tests can swap in fakes by
assigning ``app.state.services`` directly.
"""

import logging
from dataclasses import dataclass

from fastapi import Request

from talkitout.core.config import Settings
from talkitout.services.audio import PermissionStatus, WavRecorder
from talkitout.services.classification import SentimentAnalyzer, create_classifier
from talkitout.services.journal import EntryCollection, ProfileService, TextJournalService
from talkitout.services.llm import create_llm
from talkitout.services.orchestrator import RecordingSessionController
from talkitout.services.storage import BaseObjectStore, UploadClient, create_object_store
from talkitout.services.streak import StreakTracker
from talkitout.services.transcription import create_transcriber

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    """Everything the routes need, built once per application."""

    recorder: WavRecorder
    store: BaseObjectStore
    entries: EntryCollection
    streak: StreakTracker
    controller: RecordingSessionController
    text_journal: TextJournalService
    profile: ProfileService
    sentiment: SentimentAnalyzer

    async def aclose(self) -> None:
        await self.controller.drain()
        await self.store.aclose()


def _create_store(settings: Settings) -> BaseObjectStore:
    if settings.storage_backend == "http":
        return create_object_store(
            "http",
            base_url=settings.storage_base_url,
            public_base_url=settings.storage_public_base_url,
            token=settings.storage_token,
            timeout=settings.upload_timeout,
        )
    if settings.storage_backend == "local" and not settings.storage_public_base_url:
        logger.warning(
            "storage_public_base_url is not set; entries will hold file:// locators "
            "that only resolve on this machine (development mode)"
        )
    return create_object_store(
        settings.storage_backend,
        root=settings.storage_root,
        public_base_url=settings.storage_public_base_url,
    )


def build_services(settings: Settings) -> AppServices:
    """Construct the recorder, clients and journal services from settings.

    Raises:
        ValueError: If a provider or backend name is unknown.
    """
    recorder = WavRecorder(
        sample_rate=settings.audio_sample_rate,
        permission=PermissionStatus(settings.microphone_permission),
    )
    transcriber = create_transcriber(
        "whisper",
        source=recorder,
        model_size=settings.whisper_model,
        device=settings.whisper_device,
        compute_type=settings.whisper_compute_type,
        language=settings.whisper_language or None,
        chunk_seconds=settings.transcription_chunk_seconds,
    )
    llm = create_llm(settings.llm_provider)
    store = _create_store(settings)
    uploader = UploadClient(
        store,
        timeout=settings.upload_timeout,
        max_attempts=settings.upload_max_attempts,
    )
    entries = EntryCollection()
    streak = StreakTracker()

    controller = RecordingSessionController(
        recorder,
        transcriber,
        create_classifier(llm, settings),
        uploader,
        entries,
        streak,
        recordings_dir=settings.recordings_dir,
        persist_failed_uploads=True,
    )
    return AppServices(
        recorder=recorder,
        store=store,
        entries=entries,
        streak=streak,
        controller=controller,
        text_journal=TextJournalService(uploader, entries, streak),
        profile=ProfileService(uploader),
        sentiment=SentimentAnalyzer(llm),
    )


def get_services(request: Request) -> AppServices:
    """FastAPI dependency returning the application's services."""
    return request.app.state.services
