"""
OpenAI chat-completions provider.

Uses the official SDK (``openai.AsyncOpenAI``). One request per call; retry
policy belongs to the calling service.
"""

import logging

from openai import (
    APIConnectionError,
    APITimeoutError,
    AsyncOpenAI,
    RateLimitError,
)

from talkitout.core.config import get_settings
from talkitout.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)


class OpenAILLM(BaseLLM):
    """Chat-completions client for OpenAI-compatible endpoints."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        max_tokens: int = 100,
        temperature: float = 0.7,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.openai_api_key
        self._model = model or settings.openai_model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._client = AsyncOpenAI(
            api_key=self._api_key,
            base_url=base_url or settings.openai_base_url or None,
            max_retries=0,
        )

    async def generate(
        self,
        prompt: str,
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                max_tokens=max_tokens or self._max_tokens,
                temperature=temperature if temperature is not None else self._temperature,
            )
        except APITimeoutError as exc:
            logger.warning("OpenAI API timeout: %s", exc)
            raise TimeoutError(f"OpenAI API request timed out: {exc}") from exc
        except APIConnectionError as exc:
            logger.warning("OpenAI API connection error: %s", exc)
            raise ConnectionError(f"Failed to connect to OpenAI API: {exc}") from exc
        except RateLimitError as exc:
            logger.warning("OpenAI API rate limit hit: %s", exc)
            raise ConnectionError(f"OpenAI API rate limit exceeded: {exc}") from exc
        except Exception as exc:
            logger.error("Unexpected OpenAI API error: %s", exc)
            raise RuntimeError(f"OpenAI API error: {exc}") from exc

        if not response.choices:
            raise RuntimeError("OpenAI API returned no choices")
        return response.choices[0].message.content or ""
