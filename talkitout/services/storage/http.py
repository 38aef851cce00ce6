"""HTTP object store client.

Writes blobs with ``PUT <base_url>/<path>`` and reads them back with a
``GET`` on the locator. Works with any bucket or gateway that accepts raw
PUT uploads (S3-style presigned gateways, MinIO, a static file server).
"""

import logging
from urllib.parse import quote

import httpx

from talkitout.services.storage.base import BaseObjectStore

logger = logging.getLogger(__name__)


class HttpObjectStore(BaseObjectStore):
    """Async ``httpx`` client for a PUT/GET object store.

    Args:
        base_url: Upload endpoint; blobs are PUT to ``<base_url>/<path>``.
        public_base_url: Prefix of the returned locators. Defaults to
            ``base_url``. A JSON response carrying ``url`` takes precedence.
        token: Optional bearer token sent with every request.
        timeout: Per-request timeout in seconds.
        transport: Optional ``httpx`` transport (used in tests).
    """

    def __init__(
        self,
        base_url: str,
        public_base_url: str = "",
        token: str = "",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("HttpObjectStore requires a base_url")
        self._base_url = base_url.rstrip("/")
        self._public_base_url = (public_base_url or base_url).rstrip("/")
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Execute a request, translating httpx errors to builtin exceptions."""
        try:
            resp = await self._client.request(method, url, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.TimeoutException as exc:
            logger.warning("Object store timeout (%s %s): %s", method, url, exc)
            raise TimeoutError(f"Object store request timed out: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Object store rejected %s %s: HTTP %s", method, url, exc.response.status_code
            )
            raise RuntimeError(
                f"Object store returned HTTP {exc.response.status_code} for {url}"
            ) from exc
        except httpx.RequestError as exc:
            logger.warning("Object store connection error (%s %s): %s", method, url, exc)
            raise ConnectionError(f"Failed to reach object store: {exc}") from exc

    async def put(self, path: str, data: bytes, content_type: str) -> str:
        quoted = quote(path.lstrip("/"))
        resp = await self._send(
            "PUT",
            f"/{quoted}",
            content=data,
            headers={"Content-Type": content_type},
        )

        if resp.headers.get("content-type", "").startswith("application/json"):
            url = resp.json().get("url")
            if isinstance(url, str) and url:
                return url
        return f"{self._public_base_url}/{quoted}"

    async def fetch(self, locator: str) -> bytes:
        resp = await self._send("GET", locator)
        return resp.content

    async def aclose(self) -> None:
        await self._client.aclose()
