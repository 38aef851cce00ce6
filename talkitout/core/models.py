"""
Pydantic v2 models shared by the services and the API layer.

Journal entries are a tagged union over ``type``: an ``AudioEntry`` always
carries a transcript and a durable audio locator, a ``TextEntry`` always
carries its body (literal text or a durable locator). Entries are frozen.
"""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_TOPIC = "Unknown"

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


# ---------------------------------------------------------------------------
# Journal entries
# ---------------------------------------------------------------------------


class EntryType(StrEnum):
    """Closed tag of a journal entry; never changes after creation."""

    audio = "audio"
    text = "text"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class _EntryBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    date: datetime = Field(default_factory=_utcnow)


class AudioEntry(_EntryBase):
    """A recorded entry: transcript at stop-time plus the uploaded audio locator."""

    type: Literal[EntryType.audio] = EntryType.audio
    transcript: str
    audio_url: str


class TextEntry(_EntryBase):
    """A written entry. ``text`` is either literal content or a durable locator."""

    type: Literal[EntryType.text] = EntryType.text
    title: str | None = None
    text: str


JournalEntry = Annotated[AudioEntry | TextEntry, Field(discriminator="type")]


class CollectionEventKind(StrEnum):
    """How the entry collection changed."""

    appended = "appended"
    prepended = "prepended"
    replaced = "replaced"


class CollectionEvent(BaseModel):
    """Published to collection subscribers after every mutation."""

    kind: CollectionEventKind
    entry: JournalEntry


# ---------------------------------------------------------------------------
# Classification / sentiment
# ---------------------------------------------------------------------------


class ClassificationResult(BaseModel):
    """Topic label and follow-up journaling prompt for a transcript."""

    topic: str
    prompt: str

    @property
    def is_unknown(self) -> bool:
        return self.topic == UNKNOWN_TOPIC

    @property
    def display_topic(self) -> str | None:
        """Topic for display; ``"Unknown"`` is treated as no topic."""
        return None if self.is_unknown else self.topic


class Sentiment(StrEnum):
    """Coarse sentiment of an entry."""

    positive = "positive"
    neutral = "neutral"
    negative = "negative"


class SentimentResponse(BaseModel):
    """GET /entries/{id}/sentiment response."""

    entry_id: UUID
    sentiment: Sentiment
    advice: str


# ---------------------------------------------------------------------------
# Recording session
# ---------------------------------------------------------------------------


class SessionEventType(StrEnum):
    """Discriminator for events published by the recording controller."""

    started = "started"
    transcript = "transcript"
    stopped = "stopped"
    classification = "classification"
    entry_saved = "entry_saved"
    upload_failed = "upload_failed"
    permission_denied = "permission_denied"
    error = "error"


class SessionEvent(BaseModel):
    """Event sent to controller subscribers (and over the record WebSocket)."""

    type: SessionEventType
    session_id: int = 0
    data: dict = Field(default_factory=dict)


class RecordingStateResponse(BaseModel):
    """Snapshot of the recording controller for display."""

    is_recording: bool
    session_id: int
    lines: list[str] = Field(default_factory=list)
    topic: str | None = None
    prompt: str | None = None
    streak_count: int = 0
    last_entry_date: datetime | None = None


class PendingRetryResponse(BaseModel):
    """POST /recording/pending/retry response."""

    saved: int = 0
    failed: int = 0


# ---------------------------------------------------------------------------
# Text entries
# ---------------------------------------------------------------------------


class TextEntryCreate(BaseModel):
    """POST /entries/text request body."""

    text: str
    title: str | None = None


class TextEntryUpdate(BaseModel):
    """PATCH /entries/text/{id} request body."""

    title: str
    text: str


class TextContentResponse(BaseModel):
    """Resolved body of a text entry."""

    entry_id: UUID
    title: str | None = None
    text: str


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


class Profile(BaseModel):
    """User-visible profile fields plus the onboarding flag."""

    display_name: str = ""
    bio: str = ""
    avatar_url: str | None = None
    has_completed_onboarding: bool = False


class ProfileUpdate(BaseModel):
    """PUT /profile request body; omitted fields are left unchanged."""

    display_name: str | None = None
    bio: str | None = None
