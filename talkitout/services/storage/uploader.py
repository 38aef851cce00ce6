"""Upload client for recordings, text bodies and images.

Resolves a durable locator for a local file or an in-memory payload. The
content type is inferred from the file extension through a closed mapping.
Every failure surfaces as ``UploadError`` carrying the underlying cause.
"""

import asyncio
import logging
from pathlib import Path, PurePosixPath

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from talkitout.core.exceptions import UploadError
from talkitout.core.utils import is_locator
from talkitout.services.storage.base import BaseObjectStore

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

CONTENT_TYPES = {
    "m4a": "audio/mp4",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "mp4": "video/mp4",
    "mov": "video/quicktime",
}


def content_type_for(path: str | Path) -> str:
    """Return the MIME type for ``path`` based on its extension."""
    suffix = PurePosixPath(str(path)).suffix.lower().lstrip(".")
    return CONTENT_TYPES.get(suffix, DEFAULT_CONTENT_TYPE)


class UploadClient:
    """Writes blobs to an object store and returns their locators.

    Args:
        store: Object store backend.
        timeout: Deadline in seconds for each store request.
        max_attempts: Attempts for transient errors; 1 means no retry.
    """

    def __init__(
        self,
        store: BaseObjectStore,
        timeout: float = 60.0,
        max_attempts: int = 1,
    ) -> None:
        self._store = store
        self._timeout = timeout
        self._max_attempts = max(1, max_attempts)

    async def _put(self, destination_path: str, data: bytes, content_type: str) -> str:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=16),
            retry=retry_if_exception_type((ConnectionError, TimeoutError)),
            reraise=True,
        ):
            with attempt:
                return await asyncio.wait_for(
                    self._store.put(destination_path, data, content_type),
                    timeout=self._timeout,
                )
        raise UploadError(detail="No upload attempt was made")

    async def upload(
        self,
        local_blob: str | Path | bytes,
        destination_path: str,
        content_type: str | None = None,
    ) -> str:
        """Upload a local file or raw bytes to ``destination_path``.

        Args:
            local_blob: Path to a local file, or the payload itself.
            destination_path: Path inside the object store.
            content_type: Explicit MIME type. Inferred from the local file
                name (or from ``destination_path`` for raw bytes) if omitted.

        Returns:
            The durable locator of the uploaded blob.

        Raises:
            UploadError: If the payload cannot be read or the store write fails.
        """
        if isinstance(local_blob, bytes):
            data = local_blob
            ctype = content_type or content_type_for(destination_path)
        else:
            source = Path(local_blob)
            try:
                data = await asyncio.to_thread(source.read_bytes)
            except OSError as exc:
                raise UploadError(detail=f"Cannot read {source}: {exc}", cause=exc) from exc
            ctype = content_type or content_type_for(source)

        try:
            locator = await self._put(destination_path, data, ctype)
        except UploadError:
            raise
        except Exception as exc:
            logger.warning("Upload to %s failed: %s", destination_path, exc)
            raise UploadError(
                detail=f"Upload to {destination_path} failed: {exc}", cause=exc
            ) from exc

        logger.info("Uploaded %d bytes to %s (%s)", len(data), destination_path, ctype)
        return locator

    async def upload_text(self, text: str, destination_path: str) -> str:
        """Upload ``text`` as UTF-8 through the same path-based addressing."""
        return await self.upload(
            text.encode("utf-8"), destination_path, content_type=TEXT_CONTENT_TYPE
        )

    async def fetch_text(self, text_or_locator: str) -> str:
        """Resolve an entry body: fetch it if it is a locator, else return it as-is.

        Raises:
            UploadError: If the locator cannot be fetched or decoded.
        """
        if not is_locator(text_or_locator):
            return text_or_locator

        try:
            data = await asyncio.wait_for(
                self._store.fetch(text_or_locator), timeout=self._timeout
            )
            return data.decode("utf-8")
        except Exception as exc:
            logger.warning("Failed to load %s: %s", text_or_locator, exc)
            raise UploadError(detail=f"Failed to load entry: {exc}", cause=exc) from exc
