"""
Classification module - topic/prompt classification and sentiment scoring.
"""

from talkitout.core.config import Settings
from talkitout.services.llm.base import BaseLLM

from .classifier import TopicClassifier
from .sentiment import SentimentAnalyzer

__all__ = ["SentimentAnalyzer", "TopicClassifier", "create_classifier"]


def create_classifier(llm: BaseLLM, settings: Settings) -> TopicClassifier:
    """Factory function to create a TopicClassifier from settings.

    Args:
        llm: The LLM provider to use for classification.
        settings: Supplies timeout, attempt count, and token cap.

    Returns:
        A configured TopicClassifier.
    """
    return TopicClassifier(
        llm,
        timeout=settings.classification_timeout,
        max_attempts=settings.classification_max_attempts,
        max_tokens=settings.classification_max_tokens,
    )
