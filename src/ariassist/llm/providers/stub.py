"""Deterministic in-process provider.

Used by the test-suite and by ``ari --provider stub`` to run the whole
conversation flow without network access.
"""

import asyncio
from collections.abc import AsyncIterator, Callable
from typing import Any

from ..base import GenerationProvider
from ..models import ProviderResponse, SnapshotStream


class StubProvider(GenerationProvider):
    """Scripted generation provider.

    Replies come from, in order of precedence:
    1. the ``responses`` queue (consumed first-in first-out)
    2. the ``reply`` callable applied to the prompt
    3. a fixed echo of the last prompt line

    Every call is recorded in ``calls`` as ``(prompt, instructions)``.
    """

    def __init__(
        self,
        responses: list[str] | None = None,
        reply: Callable[[str], str] | None = None,
        chunk_size: int = 8,
        delay: float = 0.0,
        error: Exception | None = None,
        model: str = "stub-1",
    ):
        """Initialize the stub provider.

        Args:
            responses: Queue of canned replies
            reply: Fallback reply function when the queue is empty
            chunk_size: Characters per streamed delta
            delay: Seconds to sleep between streamed deltas
            error: Exception to raise from every call instead of replying
            model: Reported model name
        """
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")
        self._responses = list(responses or [])
        self._reply = reply
        self._chunk_size = chunk_size
        self._delay = delay
        self._error = error
        self._model = model
        self.calls: list[tuple[str, str | None]] = []
        self.closed = False

    @property
    def model(self) -> str:
        return self._model

    def _next_reply(self, prompt: str) -> str:
        if self._responses:
            return self._responses.pop(0)
        if self._reply is not None:
            return self._reply(prompt)
        last_line = prompt.strip().splitlines()[-1] if prompt.strip() else ""
        return f"Echo: {last_line}"

    async def respond(
        self,
        prompt: str,
        instructions: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> ProviderResponse:
        self.calls.append((prompt, instructions))
        if self._error is not None:
            raise self._error
        content = self._next_reply(prompt)
        return ProviderResponse(content=content, model=self._model, usage=_usage(prompt, content))

    async def stream_response(
        self,
        prompt: str,
        instructions: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> SnapshotStream:
        self.calls.append((prompt, instructions))
        stream = SnapshotStream(
            self._delta_generator(prompt, lambda usage: stream.set_usage(usage))
        )
        return stream

    async def _delta_generator(
        self, prompt: str, on_usage: Callable[[dict[str, int]], None]
    ) -> AsyncIterator[str]:
        if self._error is not None:
            raise self._error
        content = self._next_reply(prompt)
        for start in range(0, len(content), self._chunk_size):
            # always yield control so cancellation can land between deltas
            await asyncio.sleep(self._delay)
            yield content[start:start + self._chunk_size]
        on_usage(_usage(prompt, content))

    async def close(self) -> None:
        self.closed = True


def _usage(prompt: str, content: str) -> dict[str, int]:
    prompt_tokens = len(prompt.split())
    completion_tokens = len(content.split())
    return {
        "prompt_tokens": prompt_tokens,
        "completion_tokens": completion_tokens,
        "total_tokens": prompt_tokens + completion_tokens,
    }
