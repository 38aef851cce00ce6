"""Filesystem-backed object store.

Blobs live under a root directory; the content type is kept in a sidecar
file next to each blob. Writes go to a temporary file first and are moved
into place, so a failed write never leaves a partial blob behind.
"""

import asyncio
import logging
import os
from pathlib import Path
from urllib.parse import quote, unquote, urlparse
from urllib.request import url2pathname

from talkitout.services.storage.base import BaseObjectStore

logger = logging.getLogger(__name__)

CONTENT_TYPE_SUFFIX = ".content-type"


class LocalObjectStore(BaseObjectStore):
    """Stores blobs on local disk.

    Args:
        root: Directory holding all blobs.
        public_base_url: When set, locators are ``<public_base_url>/<path>``
            (e.g. a static file server in front of ``root``). Otherwise
            locators are ``file://`` URIs, which only resolve on this host;
            use that mode for development and tests.
    """

    def __init__(self, root: str | Path, public_base_url: str = "") -> None:
        self._root = Path(root).resolve()
        self._public_base_url = public_base_url.rstrip("/")

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, path: str) -> Path:
        target = (self._root / path.lstrip("/")).resolve()
        if self._root not in target.parents:
            raise ValueError(f"Path escapes the store root: {path!r}")
        return target

    def locator_for(self, path: str) -> str:
        if self._public_base_url:
            return f"{self._public_base_url}/{quote(path.lstrip('/'))}"
        return self._resolve(path).as_uri()

    def content_type_of(self, path: str) -> str | None:
        """Return the content type recorded for ``path``, if any."""
        target = self._resolve(path)
        sidecar = target.with_name(target.name + CONTENT_TYPE_SUFFIX)
        if not sidecar.exists():
            return None
        return sidecar.read_text(encoding="utf-8")

    @staticmethod
    def _write(target: Path, data: bytes, content_type: str) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_name(f".{target.name}.part")
        try:
            tmp.write_bytes(data)
            os.replace(tmp, target)
        finally:
            tmp.unlink(missing_ok=True)
        try:
            target.with_name(target.name + CONTENT_TYPE_SUFFIX).write_text(
                content_type, encoding="utf-8"
            )
        except OSError:
            target.unlink(missing_ok=True)
            raise

    async def put(self, path: str, data: bytes, content_type: str) -> str:
        target = self._resolve(path)
        await asyncio.to_thread(self._write, target, data, content_type)
        logger.debug("Stored %d bytes at %s (%s)", len(data), target, content_type)
        return self.locator_for(path)

    def _path_for_locator(self, locator: str) -> Path:
        if self._public_base_url and locator.startswith(self._public_base_url + "/"):
            return self._resolve(unquote(locator[len(self._public_base_url) + 1 :]))
        parsed = urlparse(locator)
        if parsed.scheme == "file":
            target = Path(url2pathname(parsed.path)).resolve()
            if self._root in target.parents:
                return target
        raise ValueError(f"Locator does not belong to this store: {locator!r}")

    async def fetch(self, locator: str) -> bytes:
        target = self._path_for_locator(locator)
        return await asyncio.to_thread(target.read_bytes)
