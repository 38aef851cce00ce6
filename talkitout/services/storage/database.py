"""
Local SQLite store for the journal's persisted state.

Holds two tables: ``settings`` (profile fields and the onboarding flag as
key-value rows) and ``pending_uploads`` (recordings whose upload failed and
await ``retry_pending_uploads()``). Journal entries themselves live in memory.

Services open a unit of work with ``async with get_session()``; it commits
when the block exits cleanly and rolls back when it raises.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from talkitout.core.config import get_settings


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


# One engine per process; tests swap it via ``_engine`` and ``reset_engine``.
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine(url: str | None = None) -> AsyncEngine:
    """Return the process-wide engine for ``database_url``.

    For a file-based SQLite URL the parent directory (``data/`` by default)
    is created first.
    """
    global _engine
    if _engine is None:
        db_url = url or get_settings().database_url
        parsed = make_url(db_url)
        if parsed.get_backend_name() == "sqlite" and parsed.database not in (None, "", ":memory:"):
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
        _engine = create_async_engine(db_url, echo=False)
    return _engine


def get_session_factory(
    engine: AsyncEngine | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Sessions keep loaded rows usable after commit (``expire_on_commit=False``)."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            engine or get_engine(),
            expire_on_commit=False,
        )
    return _session_factory


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """Unit of work for settings and pending-upload writes."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Create the ``settings`` and ``pending_uploads`` tables if missing.

    Args:
        engine: Engine to use instead of the configured one (in-memory in tests).
    """
    # Registers the ORM tables on Base.metadata
    from talkitout.services.storage import models_db  # noqa: F401

    eng = engine or get_engine()
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose the engine at shutdown."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


def reset_engine() -> None:
    """Forget the engine without disposing it (tests own their engines)."""
    global _engine, _session_factory
    _engine = None
    _session_factory = None
