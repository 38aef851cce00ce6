"""
Journal module - entry collection, text entries, and profile settings.
"""

from .collection import EntryCollection
from .profile import ProfileService
from .text_entries import TextJournalService

__all__ = ["EntryCollection", "ProfileService", "TextJournalService"]
