"""Integration test fixtures for TalkItOut.

Provides an async HTTP client and a sync TestClient (for WebSocket) wired to
real services: a WAV recorder, a local object store under ``tmp_path``, a
SQLite database, and mocked LLM replies. Live transcription is
replaced by a transcriber that reports one fixed fragment per PCM frame.
"""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from starlette.testclient import TestClient

from talkitout.api.app import create_app
from talkitout.api.dependencies import AppServices
from talkitout.services.audio import PermissionStatus, WavRecorder
from talkitout.services.classification import SentimentAnalyzer, TopicClassifier
from talkitout.services.journal import EntryCollection, ProfileService, TextJournalService
from talkitout.services.llm.base import BaseLLM
from talkitout.services.orchestrator import RecordingSessionController
from talkitout.services.storage import UploadClient, database
from talkitout.services.storage.local import LocalObjectStore
from talkitout.services.streak import StreakTracker
from talkitout.services.transcription.base import BaseLiveTranscriber

SPOKEN_TEXT = "I had a wonderful day."


class EchoTranscriber(BaseLiveTranscriber):
    """Reports ``text`` once for every PCM frame fed to the recorder."""

    def __init__(self, recorder: WavRecorder, text: str = SPOKEN_TEXT) -> None:
        self._recorder = recorder
        self._text = text
        self._on_text = None

    async def start(self, on_text) -> None:
        self._on_text = on_text
        self._recorder.add_listener(self._on_pcm)

    def _on_pcm(self, _pcm: bytes) -> None:
        if self._on_text is not None:
            self._on_text(self._text)

    async def stop(self) -> None:
        self._recorder.remove_listener(self._on_pcm)
        self._on_text = None


@pytest.fixture
def sentiment_llm():
    llm = AsyncMock(spec=BaseLLM)
    llm.generate.return_value = '{"score": 0.6}'
    return llm


@pytest.fixture
def services(tmp_path, mock_llm, sentiment_llm) -> AppServices:
    recorder = WavRecorder(sample_rate=16000, permission=PermissionStatus.granted)
    store = LocalObjectStore(tmp_path / "objects")
    uploader = UploadClient(store)
    entries = EntryCollection()
    streak = StreakTracker()
    controller = RecordingSessionController(
        recorder,
        EchoTranscriber(recorder),
        TopicClassifier(mock_llm),
        uploader,
        entries,
        streak,
        recordings_dir=tmp_path / "recordings",
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
        sentiment=SentimentAnalyzer(sentiment_llm),
    )


@pytest.fixture
def app():
    """Create a fresh FastAPI application instance."""
    return create_app()


@pytest.fixture
async def async_client(app, services, use_test_db):
    """AsyncClient over ASGITransport (no lifespan); services set directly."""
    app.state.services = services
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def test_client(app, services, tmp_path):
    """Synchronous TestClient for WebSocket tests; runs the real lifespan.

    The TestClient runs its own event loop, so it gets a file-based SQLite
    engine whose connections are opened inside that loop.
    """
    database._engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ws.db'}")
    database._session_factory = None
    try:
        with patch("talkitout.api.app.build_services", return_value=services):
            with TestClient(app) as c:
                yield c
    finally:
        database.reset_engine()
