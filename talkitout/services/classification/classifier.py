"""Journal topic classification.

Asks the configured LLM for the main topic of a transcript and a
context-aware follow-up journaling prompt. Every failure (transport, timeout,
malformed payload) resolves to the ``"Unknown"`` sentinel and a fallback
prompt; nothing propagates to the caller.
"""

import asyncio
import json
import logging

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from talkitout.core.exceptions import ClassificationError
from talkitout.core.models import UNKNOWN_TOPIC, ClassificationResult
from talkitout.core.utils import strip_code_fences
from talkitout.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)

TOPIC_SYSTEM_PROMPT = (
    "You are an assistant that classifies the main topic of a journal entry and "
    "suggests a context-aware journaling prompt. "
    'Respond in JSON: {"topic": <topic>, "prompt": <prompt>}'
)

TRANSPORT_FALLBACK_PROMPT = "Could not get prompt."
PARSE_FALLBACK_PROMPT = "Could not parse response."


def parse_classification(raw: str) -> ClassificationResult:
    """Parse an LLM reply into a result.

    Raises:
        ClassificationError: If the reply is not a JSON object with string
            ``topic`` and ``prompt`` fields.
    """
    try:
        data = json.loads(strip_code_fences(raw))
    except json.JSONDecodeError as exc:
        raise ClassificationError(detail=f"Invalid JSON from LLM: {raw[:200]}") from exc

    if not isinstance(data, dict):
        raise ClassificationError(detail="LLM response is not a JSON object")

    topic = data.get("topic")
    prompt = data.get("prompt")
    if not isinstance(topic, str) or not isinstance(prompt, str):
        raise ClassificationError(detail="LLM response is missing topic or prompt")

    return ClassificationResult(topic=topic, prompt=prompt)


class TopicClassifier:
    """Resolves a (topic, prompt) pair for a transcript, or the fallback pair.

    Args:
        llm: Chat-completion provider.
        timeout: Deadline in seconds for the whole request.
        max_attempts: Attempts for transient errors; 1 means no retry.
        max_tokens: Response length cap passed to the provider.
    """

    def __init__(
        self,
        llm: BaseLLM,
        timeout: float = 20.0,
        max_attempts: int = 1,
        max_tokens: int = 100,
    ) -> None:
        self._llm = llm
        self._timeout = timeout
        self._max_attempts = max(1, max_attempts)
        self._max_tokens = max_tokens

    async def _request(self, transcript: str) -> str:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            retry=retry_if_exception_type((ConnectionError, TimeoutError)),
            reraise=True,
        ):
            with attempt:
                return await asyncio.wait_for(
                    self._llm.generate(
                        f'Journal entry: "{transcript}"',
                        system=TOPIC_SYSTEM_PROMPT,
                        max_tokens=self._max_tokens,
                    ),
                    timeout=self._timeout,
                )
        raise ClassificationError(detail="No classification attempt was made")

    async def classify(self, transcript: str) -> ClassificationResult:
        """Classify ``transcript``; never raises."""
        try:
            raw = await self._request(transcript)
        except Exception as exc:
            logger.warning("Topic classification request failed: %s", exc)
            return ClassificationResult(topic=UNKNOWN_TOPIC, prompt=TRANSPORT_FALLBACK_PROMPT)

        try:
            return parse_classification(raw)
        except ClassificationError as exc:
            logger.warning("Topic classification response rejected: %s", exc.detail)
            return ClassificationResult(topic=UNKNOWN_TOPIC, prompt=PARSE_FALLBACK_PROMPT)
