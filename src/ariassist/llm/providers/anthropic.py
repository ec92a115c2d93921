"""Anthropic Claude generation provider.

Uses the official Anthropic Python SDK.
Reference: https://github.com/anthropics/anthropic-sdk-python
"""

from collections.abc import AsyncIterator, Callable
from typing import Any

from anthropic import AsyncAnthropic

from ..base import GenerationProvider
from ..models import ProviderResponse, SnapshotStream

DEFAULT_MAX_TOKENS = 4096


class AnthropicProvider(GenerationProvider):
    """Anthropic Claude generation provider.

    Hidden design decisions:
    - Instructions go to the top-level ``system`` parameter
    - ``max_tokens`` is mandatory for the Messages API, so a default applies
    - Usage is assembled from message_start and message_delta events
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        base_url: str | None = None,
        **client_kwargs: Any
    ):
        self._model = model
        self._client = AsyncAnthropic(
            api_key=api_key,
            base_url=base_url,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        return self._model

    def _request_params(
        self,
        prompt: str,
        instructions: str | None,
        temperature: float,
        max_tokens: int | None,
        **kwargs: Any
    ) -> dict[str, Any]:
        params: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens or DEFAULT_MAX_TOKENS,
            **kwargs
        }
        if instructions:
            params["system"] = instructions
        return params

    async def respond(
        self,
        prompt: str,
        instructions: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> ProviderResponse:
        """Generate a single-shot response with Claude."""
        params = self._request_params(prompt, instructions, temperature, max_tokens, **kwargs)
        response = await self._client.messages.create(**params)

        usage = {
            "prompt_tokens": response.usage.input_tokens,
            "completion_tokens": response.usage.output_tokens,
            "total_tokens": response.usage.input_tokens + response.usage.output_tokens,
        }

        content = "".join(
            block.text for block in response.content if hasattr(block, "text")
        )

        return ProviderResponse(
            content=content,
            model=response.model,
            usage=usage
        )

    async def stream_response(
        self,
        prompt: str,
        instructions: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> SnapshotStream:
        """Start a streaming generation with Claude."""
        params = self._request_params(prompt, instructions, temperature, max_tokens, **kwargs)
        stream = SnapshotStream(
            self._delta_generator(params, lambda usage: stream.set_usage(usage))
        )
        return stream

    async def _delta_generator(
        self, params: dict[str, Any], on_usage: Callable[[dict[str, int]], None]
    ) -> AsyncIterator[str]:
        input_tokens = 0
        output_tokens = 0

        async with self._client.messages.stream(**params) as stream:
            async for event in stream:
                event_type = getattr(event, "type", None)
                if event_type == "message_start":
                    input_tokens = event.message.usage.input_tokens
                elif event_type == "message_delta":
                    # output_tokens is cumulative here
                    output_tokens = getattr(event.usage, "output_tokens", output_tokens)
                elif event_type == "content_block_delta" and hasattr(event.delta, "text"):
                    yield event.delta.text

            on_usage({
                "prompt_tokens": input_tokens,
                "completion_tokens": output_tokens,
                "total_tokens": input_tokens + output_tokens,
            })

    async def close(self) -> None:
        await self._client.close()
