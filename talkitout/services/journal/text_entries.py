"""Text journal flow: create, load and edit written entries.

Bodies are uploaded as UTF-8 to ``text_entries/<uuid>.txt`` and the entry
stores the returned locator; the content is fetched lazily on load.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID, uuid4

from talkitout.core.exceptions import InvalidEntryError
from talkitout.core.models import TextEntry
from talkitout.services.journal.collection import EntryCollection
from talkitout.services.storage.uploader import UploadClient
from talkitout.services.streak import StreakTracker

logger = logging.getLogger(__name__)

TEXT_ENTRY_PREFIX = "text_entries"


class TextJournalService:
    """Writes text entries to the object store and the entry collection."""

    def __init__(
        self,
        uploader: UploadClient,
        entries: EntryCollection,
        streak: StreakTracker | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._uploader = uploader
        self._entries = entries
        self._streak = streak
        self._clock = clock

    def _get_text_entry(self, entry_id: UUID) -> TextEntry:
        entry = self._entries.get(entry_id)
        if not isinstance(entry, TextEntry):
            raise InvalidEntryError(f"Entry {entry_id} is not a text entry")
        return entry

    async def create(self, text: str, title: str | None = None) -> TextEntry:
        """Upload a new body and append the entry.

        Raises:
            InvalidEntryError: If the text is blank.
            UploadError: If the body cannot be uploaded; nothing is appended.
        """
        body = text.strip()
        if not body:
            raise InvalidEntryError("Please enter some text.")

        locator = await self._uploader.upload_text(body, f"{TEXT_ENTRY_PREFIX}/{uuid4()}.txt")
        entry = TextEntry(
            date=self._clock(),
            title=(title or "").strip() or None,
            text=locator,
        )
        self._entries.append(entry)
        if self._streak is not None:
            self._streak.record(entry.date)
        logger.info("Saved text entry %s", entry.id)
        return entry

    async def load(self, entry_id: UUID) -> str:
        """Return the body of a text entry, fetching it if stored remotely."""
        entry = self._get_text_entry(entry_id)
        return await self._uploader.fetch_text(entry.text)

    async def edit(self, entry_id: UUID, title: str, text: str) -> TextEntry:
        """Replace title and body, preserving the entry's id and date.

        Raises:
            InvalidEntryError: If the title or text is blank.
            UploadError: If the new body cannot be uploaded; the entry is unchanged.
        """
        current = self._get_text_entry(entry_id)
        new_title = title.strip()
        body = text.strip()
        if not new_title:
            raise InvalidEntryError("Please enter a title.")
        if not body:
            raise InvalidEntryError("Please enter some text.")

        locator = await self._uploader.upload_text(body, f"{TEXT_ENTRY_PREFIX}/{uuid4()}.txt")
        updated = self._entries.replace(
            current.id, TextEntry(title=new_title, text=locator)
        )
        logger.info("Updated text entry %s", updated.id)
        return updated
