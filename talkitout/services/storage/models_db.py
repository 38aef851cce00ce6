"""
SQLAlchemy ORM models for local persisted state.

Tables: ``settings`` (profile key-value pairs, onboarding flag) and
``pending_uploads`` (recordings whose upload failed and await a retry).
"""

from datetime import UTC, datetime

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from talkitout.services.storage.database import Base


class Setting(Base):
    """A single user-visible setting."""

    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text, default="")
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    def __repr__(self) -> str:
        return f"<Setting key={self.key!r}>"


class PendingUpload(Base):
    """An audio entry that exists only locally until its upload succeeds."""

    __tablename__ = "pending_uploads"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    local_path: Mapped[str] = mapped_column(String(512))
    destination_path: Mapped[str] = mapped_column(String(512))
    transcript: Mapped[str] = mapped_column(Text, default="")
    recorded_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    attempts: Mapped[int] = mapped_column(default=1)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<PendingUpload id={self.id} destination={self.destination_path!r}>"
