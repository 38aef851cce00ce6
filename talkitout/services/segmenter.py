"""Transcript segmentation for progressive display.

Splits a transcript into short lines: a line ends after 8 words or after a
word ending in terminal punctuation, whichever comes first. The function is
pure; callers re-segment the whole transcript on every update.
"""

MAX_WORDS_PER_LINE = 8
TERMINAL_PUNCTUATION = (".", "!", "?")


def segment(text: str) -> list[str]:
    """Split ``text`` into display lines.

    Args:
        text: Raw transcript text. May be empty.

    Returns:
        Ordered lines, each a space-joined group of whitespace-separated tokens.
    """
    lines: list[str] = []
    current: list[str] = []

    for token in text.split():
        current.append(token)
        if len(current) >= MAX_WORDS_PER_LINE or token.endswith(TERMINAL_PUNCTUATION):
            lines.append(" ".join(current))
            current = []

    if current:
        lines.append(" ".join(current))
    return lines
