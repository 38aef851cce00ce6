"""In-memory journal entry collection with change notifications.

Entries are kept in insertion order, newest last, for audio and text entries
alike. ``prepend`` exists for callers that need it but the service flows use
``append``. There is no deletion. Subscribers receive a ``CollectionEvent``
after every mutation.
"""

import logging
from collections.abc import Callable, Iterator
from uuid import UUID

from talkitout.core.exceptions import EntryNotFoundError, InvalidEntryError
from talkitout.core.models import (
    AudioEntry,
    CollectionEvent,
    CollectionEventKind,
    TextEntry,
)

logger = logging.getLogger(__name__)

Entry = AudioEntry | TextEntry
CollectionListener = Callable[[CollectionEvent], None]


class EntryCollection:
    """Ordered, observable list of journal entries."""

    def __init__(self, entries: list[Entry] | None = None) -> None:
        self._entries: list[Entry] = list(entries or [])
        self._listeners: list[CollectionListener] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(tuple(self._entries))

    def all(self) -> tuple[Entry, ...]:
        """Snapshot of all entries in order."""
        return tuple(self._entries)

    def get(self, entry_id: UUID) -> Entry:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        raise EntryNotFoundError(entry_id)

    def append(self, entry: Entry) -> None:
        self._entries.append(entry)
        self._publish(CollectionEventKind.appended, entry)

    def prepend(self, entry: Entry) -> None:
        self._entries.insert(0, entry)
        self._publish(CollectionEventKind.prepended, entry)

    def replace(self, entry_id: UUID, new_entry: Entry) -> Entry:
        """Swap the entry in place, keeping the original ``id`` and ``date``.

        Raises:
            EntryNotFoundError: If no entry has ``entry_id``.
            InvalidEntryError: If the replacement has a different type.
        """
        for index, current in enumerate(self._entries):
            if current.id == entry_id:
                break
        else:
            raise EntryNotFoundError(entry_id)

        if new_entry.type != current.type:
            raise InvalidEntryError(
                f"Cannot replace a {current.type} entry with a {new_entry.type} entry"
            )

        replacement = new_entry.model_copy(update={"id": current.id, "date": current.date})
        self._entries[index] = replacement
        self._publish(CollectionEventKind.replaced, replacement)
        return replacement

    def subscribe(self, listener: CollectionListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, kind: CollectionEventKind, entry: Entry) -> None:
        event = CollectionEvent(kind=kind, entry=entry)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.warning("Collection listener failed for %s event (non-fatal)", kind)
