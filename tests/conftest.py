"""Shared pytest fixtures for the TalkItOut test suite.

Provides mock LLM providers, PCM audio samples, and in-memory SQLite
database helpers used across unit and integration tests.
"""

import json
import math
import struct
from unittest.mock import AsyncMock

import pytest

# ---------------------------------------------------------------------------
# LLM Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_llm():
    """Create a mock LLM provider for unit testing.

    Returns:
        AsyncMock: A mock implementing the BaseLLM interface whose
        ``generate`` returns a valid topic/prompt classification.
    """
    from talkitout.services.llm.base import BaseLLM

    llm = AsyncMock(spec=BaseLLM)
    llm.generate.return_value = json.dumps(
        {"topic": "Work", "prompt": "What made today's meeting stressful?"}
    )
    return llm


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_pcm_bytes():
    """Generate 1 second of 440Hz sine-wave PCM audio (16kHz, 16-bit, mono)."""
    sample_rate = 16000
    amplitude = 16000  # ~50% of max int16

    samples = []
    for i in range(sample_rate):
        value = int(amplitude * math.sin(2 * math.pi * 440.0 * i / sample_rate))
        samples.append(struct.pack("<h", value))
    return b"".join(samples)


@pytest.fixture
def silent_pcm_bytes():
    """Generate 1 second of silence as PCM audio (16kHz, 16-bit, mono)."""
    return b"\x00\x00" * 16000


# ---------------------------------------------------------------------------
# Database Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine with tables, dispose after test."""
    from sqlalchemy.ext.asyncio import create_async_engine

    from talkitout.services.storage.database import init_db

    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Yield an AsyncSession bound to the test engine; rolls back after test."""
    from sqlalchemy.ext.asyncio import async_sessionmaker

    factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def repository(db_session):
    """Return a JournalRepository bound to the test session."""
    from talkitout.services.storage.repository import JournalRepository

    return JournalRepository(db_session)


@pytest.fixture
def use_test_db(db_engine):
    """Point ``get_session()`` at the in-memory test engine."""
    from talkitout.services.storage import database

    database._engine = db_engine
    database._session_factory = None
    yield db_engine
    database.reset_engine()
