"""TalkItOut - voice and text journaling service."""

__version__ = "0.1.0"
