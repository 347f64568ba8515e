"""
NoteForge Backend: Abstract LLM Gateway Interface
=================================================

What:  Abstract base class for the generative-text gateway.
How:   Concrete implementations inherit from LLMService and implement
       generate(). GeminiService is the only production implementation;
       tests substitute an AsyncMock.
Who:   Called by AIService for every summarize / title / elaborate request.
"""

from abc import ABC, abstractmethod


class LLMService(ABC):
    """
    Abstract interface for single-turn text generation.

    Contract:
        - generate() sends one user prompt and returns the first candidate's text
        - Provider errors are translated into ConfigError / UpstreamError
        - No retries: the first failure is reported to the caller
    """

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """
        Send a prompt to the upstream model and return its text.

        Args:
            prompt: Complete prompt text (templates are applied by the caller).

        Returns:
            str: Text of the first candidate, or "" when the response carries
                 no candidate text. Never None.

        Raises:
            ConfigError: No API key is configured.
            UpstreamError: The upstream call did not succeed.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the upstream is reachable with the configured key.

        Returns: True if reachable, False otherwise. Never raises.
        """
        ...
