"""Profile fields and onboarding flag, stored as key-value settings."""

import logging
from pathlib import PurePosixPath
from uuid import uuid4

from talkitout.core.exceptions import InvalidEntryError
from talkitout.core.models import Profile
from talkitout.services.storage.database import get_session
from talkitout.services.storage.repository import JournalRepository
from talkitout.services.storage.uploader import UploadClient

logger = logging.getLogger(__name__)

DISPLAY_NAME_KEY = "profile.display_name"
BIO_KEY = "profile.bio"
AVATAR_URL_KEY = "profile.avatar_url"
ONBOARDING_KEY = "hasCompletedOnboarding"

_KEYS = [DISPLAY_NAME_KEY, BIO_KEY, AVATAR_URL_KEY, ONBOARDING_KEY]


def _to_profile(values: dict[str, str]) -> Profile:
    return Profile(
        display_name=values.get(DISPLAY_NAME_KEY, ""),
        bio=values.get(BIO_KEY, ""),
        avatar_url=values.get(AVATAR_URL_KEY) or None,
        has_completed_onboarding=values.get(ONBOARDING_KEY) == "true",
    )


class ProfileService:
    """Reads and writes the user's profile settings."""

    def __init__(self, uploader: UploadClient) -> None:
        self._uploader = uploader

    async def get_profile(self) -> Profile:
        async with get_session() as session:
            values = await JournalRepository(session).get_settings(_KEYS)
        return _to_profile(values)

    async def update_profile(
        self,
        display_name: str | None = None,
        bio: str | None = None,
    ) -> Profile:
        """Overwrite the given fields; None leaves a field unchanged."""
        async with get_session() as session:
            repo = JournalRepository(session)
            if display_name is not None:
                await repo.set_setting(DISPLAY_NAME_KEY, display_name.strip())
            if bio is not None:
                await repo.set_setting(BIO_KEY, bio.strip())
            values = await repo.get_settings(_KEYS)
        return _to_profile(values)

    async def set_avatar(self, image: bytes, filename: str) -> Profile:
        """Upload a new avatar image and store its locator.

        Raises:
            InvalidEntryError: If the image is empty.
            UploadError: If the upload fails; the previous avatar is kept.
        """
        if not image:
            raise InvalidEntryError("Avatar image is empty")

        suffix = PurePosixPath(filename).suffix.lower()
        locator = await self._uploader.upload(image, f"avatars/{uuid4()}{suffix}")
        async with get_session() as session:
            repo = JournalRepository(session)
            await repo.set_setting(AVATAR_URL_KEY, locator)
            values = await repo.get_settings(_KEYS)
        logger.info("Avatar updated")
        return _to_profile(values)

    async def complete_onboarding(self) -> Profile:
        async with get_session() as session:
            repo = JournalRepository(session)
            await repo.set_setting(ONBOARDING_KEY, "true")
            values = await repo.get_settings(_KEYS)
        return _to_profile(values)
