from abc import ABC, abstractmethod
from typing import Any

from .models import ProviderResponse, SnapshotStream


class GenerationProvider(ABC):
    """Abstract base class for text-generation backends.

    This module hides the design decision of which model serves the assistant.
    The conversation core only needs two capabilities:
    - a single-shot ``respond`` for transforms and summaries
    - a ``stream_response`` yielding cumulative text snapshots for chat

    Implementations must handle provider-specific details like:
    - API client setup and authentication
    - Request/response format conversion
    - Turning native deltas into a ``SnapshotStream``

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            response = await provider.respond("Hello")
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Default model name used by this provider."""

    @abstractmethod
    async def respond(
        self,
        prompt: str,
        instructions: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> ProviderResponse:
        """Generate a complete response for a prompt.

        Args:
            prompt: The user-facing prompt text
            instructions: Optional system instructions for the session
            temperature: Sampling temperature (0.0 to 2.0)
            max_tokens: Maximum tokens to generate
            **kwargs: Provider-specific parameters

        Returns:
            ProviderResponse containing generated content and metadata

        Raises:
            Exception: Provider-specific errors during generation
        """

    @abstractmethod
    async def stream_response(
        self,
        prompt: str,
        instructions: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> SnapshotStream:
        """Start a streaming generation for a prompt.

        Args:
            prompt: The user-facing prompt text
            instructions: Optional system instructions for the session
            temperature: Sampling temperature (0.0 to 2.0)
            max_tokens: Maximum tokens to generate
            **kwargs: Provider-specific parameters

        Returns:
            SnapshotStream yielding the cumulative text after every delta.
            After iteration, access usage via stream.usage

        Raises:
            Exception: Provider-specific errors during generation
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "GenerationProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
