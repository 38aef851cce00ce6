"""
Abstract base class for chat-completion providers.

All LLM implementations (OpenAI, Claude, Ollama) implement this interface so
the classification and sentiment services stay provider-agnostic. Providers
translate SDK errors into ``ConnectionError`` / ``TimeoutError`` (transient)
or ``RuntimeError`` (everything else).
"""

from abc import ABC, abstractmethod


class BaseLLM(ABC):
    """Interface that every LLM provider must implement."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Send one chat turn and return the assistant's text.

        Args:
            prompt: User message content.
            system: Optional system instruction.
            temperature: Sampling temperature override.
            max_tokens: Response length cap override.

        Returns:
            The model's text response.
        """
