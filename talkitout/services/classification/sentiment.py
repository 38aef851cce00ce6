"""Entry sentiment scoring.

The LLM returns a score in [-1, 1]; scores above 0.1 are positive, below
-0.1 negative, everything else (including failures) neutral.
"""

import json
import logging

from talkitout.core.models import Sentiment
from talkitout.core.utils import strip_code_fences
from talkitout.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)

POSITIVE_THRESHOLD = 0.1
NEGATIVE_THRESHOLD = -0.1

SENTIMENT_SYSTEM_PROMPT = (
    "You score the overall sentiment of a journal entry. "
    "Output ONLY valid JSON with a single key: score, "
    "a number between -1.0 (very negative) and 1.0 (very positive). "
    "No markdown fences or extra text."
)

_ADVICE = {
    Sentiment.positive: "Keep up the positive energy! Celebrate your wins.",
    Sentiment.neutral: "It's okay to feel neutral. Take a moment to reflect or relax.",
    Sentiment.negative: (
        "It's normal to have tough moments. Consider taking a deep breath "
        "or reaching out to someone you trust."
    ),
}


def label_for_score(score: float) -> Sentiment:
    if score > POSITIVE_THRESHOLD:
        return Sentiment.positive
    if score < NEGATIVE_THRESHOLD:
        return Sentiment.negative
    return Sentiment.neutral


def advice(sentiment: Sentiment) -> str:
    """Return the supportive message shown for ``sentiment``."""
    return _ADVICE[sentiment]


class SentimentAnalyzer:
    """Scores entry text with an LLM provider."""

    def __init__(self, llm: BaseLLM) -> None:
        self._llm = llm

    async def analyze(self, text: str) -> Sentiment:
        if not text or not text.strip():
            return Sentiment.neutral

        try:
            raw = await self._llm.generate(text, system=SENTIMENT_SYSTEM_PROMPT, temperature=0.0)
            score = float(json.loads(strip_code_fences(raw))["score"])
        except Exception as exc:
            logger.warning("Sentiment scoring failed, treating as neutral: %s", exc)
            return Sentiment.neutral

        return label_for_score(score)
