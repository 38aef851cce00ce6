"""
Data-access layer for local persisted state.

``JournalRepository`` receives an ``AsyncSession`` and calls ``flush()``
rather than ``commit()`` so that transaction boundaries are controlled by
the caller (typically :func:`get_session`).
"""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from talkitout.services.storage.models_db import PendingUpload, Setting

logger = logging.getLogger(__name__)


class JournalRepository:
    """CRUD for the ``settings`` and ``pending_uploads`` tables.

    Args:
        session: An active SQLAlchemy ``AsyncSession``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    async def get_setting(self, key: str) -> str | None:
        """Return the stored value for ``key``, or None."""
        setting = await self._session.get(Setting, key)
        return setting.value if setting is not None else None

    async def get_settings(self, keys: list[str]) -> dict[str, str]:
        """Return stored values for the given keys (missing keys are omitted)."""
        result = await self._session.execute(select(Setting).where(Setting.key.in_(keys)))
        return {s.key: s.value for s in result.scalars().all()}

    async def set_setting(self, key: str, value: str) -> Setting:
        """Insert or overwrite ``key``."""
        setting = await self._session.get(Setting, key)
        if setting is None:
            setting = Setting(key=key, value=value)
            self._session.add(setting)
        else:
            setting.value = value
        await self._session.flush()
        return setting

    # ------------------------------------------------------------------
    # Pending uploads
    # ------------------------------------------------------------------

    async def add_pending_upload(
        self,
        local_path: str,
        destination_path: str,
        transcript: str,
        recorded_at: datetime,
        last_error: str | None = None,
    ) -> PendingUpload:
        """Persist a recording whose upload failed."""
        pending = PendingUpload(
            local_path=local_path,
            destination_path=destination_path,
            transcript=transcript,
            recorded_at=recorded_at,
            last_error=last_error,
        )
        self._session.add(pending)
        await self._session.flush()
        return pending

    async def list_pending_uploads(self) -> list[PendingUpload]:
        """Return pending uploads, oldest first."""
        result = await self._session.execute(
            select(PendingUpload).order_by(PendingUpload.recorded_at, PendingUpload.id)
        )
        return list(result.scalars().all())

    async def record_failed_attempt(self, pending_id: int, error: str) -> PendingUpload | None:
        """Increment the attempt counter and store the latest error."""
        pending = await self._session.get(PendingUpload, pending_id)
        if pending is None:
            return None
        pending.attempts += 1
        pending.last_error = error
        await self._session.flush()
        return pending

    async def delete_pending_upload(self, pending_id: int) -> bool:
        """Delete a pending upload. Returns False if it did not exist."""
        pending = await self._session.get(PendingUpload, pending_id)
        if pending is None:
            return False
        await self._session.delete(pending)
        await self._session.flush()
        return True
