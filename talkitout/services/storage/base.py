"""
Abstract base class for object stores.

An object store keeps blobs under slash-separated paths and hands back a
durable locator (URL) for each write. Implementations raise
``ConnectionError`` / ``TimeoutError`` for transient failures and
``RuntimeError`` / ``OSError`` / ``ValueError`` for everything else; the
upload client wraps all of them in ``UploadError``.
"""

from abc import ABC, abstractmethod


class BaseObjectStore(ABC):
    """Interface that every object store must implement."""

    @abstractmethod
    async def put(self, path: str, data: bytes, content_type: str) -> str:
        """Store ``data`` at ``path`` tagged with ``content_type``.

        Args:
            path: Destination path inside the store (e.g. "recordings/x.wav").
            data: Blob payload.
            content_type: MIME type recorded with the blob.

        Returns:
            A durable locator for the stored blob.
        """

    @abstractmethod
    async def fetch(self, locator: str) -> bytes:
        """Return the blob addressed by a locator previously returned by ``put``."""

    async def aclose(self) -> None:
        """Release any held connections."""
