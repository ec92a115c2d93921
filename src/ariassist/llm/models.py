from collections.abc import AsyncIterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SnapshotStream:
    """Cumulative view over a streaming generation.

    Providers emit text deltas; this wrapper accumulates them and yields the
    full text generated so far on every step, so consumers always replace
    what they display instead of appending to it.

    Usage:
        stream = await provider.stream_response(prompt)
        async for snapshot in stream:
            render(snapshot)  # full text so far
        print(stream.text, stream.usage)

    The stream is lazy, finite and not restartable.
    """

    def __init__(self, deltas: AsyncIterator[str]):
        """Initialize with an async iterator of text deltas.

        Args:
            deltas: Async iterator yielding text deltas
        """
        self._deltas = deltas
        self._text = ""
        self._usage: dict[str, Any] | None = None
        self._exhausted = False

    @property
    def text(self) -> str:
        """Full text accumulated so far."""
        return self._text

    @property
    def usage(self) -> dict[str, Any] | None:
        """Token usage info (available after iteration completes)."""
        return self._usage

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def set_usage(self, usage: dict[str, Any]) -> None:
        """Set token usage info (called by provider at end of stream)."""
        self._usage = usage

    def __aiter__(self) -> "SnapshotStream":
        return self

    async def __anext__(self) -> str:
        if self._exhausted:
            raise StopAsyncIteration
        while True:
            try:
                delta = await self._deltas.__anext__()
            except StopAsyncIteration:
                self._exhausted = True
                raise
            if delta:
                self._text += delta
                return self._text

    async def aclose(self) -> None:
        """Close the underlying delta iterator if it supports it."""
        self._exhausted = True
        closer = getattr(self._deltas, "aclose", None)
        if closer is not None:
            await closer()


class ChatMessage(BaseModel):
    """A single message sent to a provider."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user', 'assistant', or 'system'")
    content: str = Field(description="Content of the message")


class ProviderResponse(BaseModel):
    """Single-shot response from a generation provider."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Generated text content")
    model: str = Field(description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )


def build_messages(prompt: str, instructions: str | None = None) -> list[ChatMessage]:
    """Turn an instructions/prompt pair into provider chat messages."""
    messages = []
    if instructions:
        messages.append(ChatMessage(role="system", content=instructions))
    messages.append(ChatMessage(role="user", content=prompt))
    return messages
