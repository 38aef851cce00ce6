"""Shared utility functions for TalkItOut."""

import re

_LOCATOR_SCHEMES = ("http://", "https://", "file://")


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences wrapping JSON from LLM responses."""
    text = text.strip()
    if text.startswith("```"):
        text = re.sub(r"^```\w*\n?", "", text)
        text = re.sub(r"\n?```$", "", text)
    return text.strip()


def is_locator(value: str) -> bool:
    """True when ``value`` is a durable locator rather than literal content."""
    return value.startswith(_LOCATOR_SCHEMES)
