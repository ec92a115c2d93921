from collections.abc import AsyncIterator, Callable
from typing import Any

from openai import AsyncOpenAI

from ..base import GenerationProvider
from ..models import ProviderResponse, SnapshotStream, build_messages


class OpenAIProvider(GenerationProvider):
    """OpenAI generation provider using the Chat Completions API.

    Hidden design decisions:
    - OpenAI API client initialization
    - Instructions sent as a leading system message
    - Usage capture from the final streamed chunk
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        organization: str | None = None,
        **client_kwargs: Any
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Default chat model
            base_url: Optional custom API base URL
            organization: Optional organization ID
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            organization=organization,
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
        messages = [
            {"role": msg.role, "content": msg.content}
            for msg in build_messages(prompt, instructions)
        ]
        params: dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "temperature": temperature,
            **kwargs
        }
        if max_tokens is not None:
            params["max_tokens"] = max_tokens
        return params

    async def respond(
        self,
        prompt: str,
        instructions: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> ProviderResponse:
        """Generate a single-shot response with OpenAI.

        Args:
            prompt: Prompt text
            instructions: Optional system instructions
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            **kwargs: Additional OpenAI-specific parameters

        Returns:
            ProviderResponse with generated content
        """
        params = self._request_params(prompt, instructions, temperature, max_tokens, **kwargs)
        completion = await self._client.chat.completions.create(**params)

        usage = None
        if completion.usage:
            usage = {
                "prompt_tokens": completion.usage.prompt_tokens,
                "completion_tokens": completion.usage.completion_tokens,
                "total_tokens": completion.usage.total_tokens
            }

        return ProviderResponse(
            content=completion.choices[0].message.content or "",
            model=completion.model,
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
        """Start a streaming generation with OpenAI.

        Returns:
            SnapshotStream over the cumulative response text
        """
        params = self._request_params(prompt, instructions, temperature, max_tokens, **kwargs)
        stream = SnapshotStream(
            self._delta_generator(params, lambda usage: stream.set_usage(usage))
        )
        return stream

    async def _delta_generator(
        self, params: dict[str, Any], on_usage: Callable[[dict[str, int]], None]
    ) -> AsyncIterator[str]:
        """Yield content deltas and record usage from the final chunk."""
        stream = await self._client.chat.completions.create(
            **params,
            stream=True,
            stream_options={"include_usage": True},
        )

        async for chunk in stream:
            if chunk.usage is not None:
                on_usage({
                    "prompt_tokens": chunk.usage.prompt_tokens,
                    "completion_tokens": chunk.usage.completion_tokens,
                    "total_tokens": chunk.usage.total_tokens,
                })
            if chunk.choices and chunk.choices[0].delta.content:
                yield chunk.choices[0].delta.content

    async def close(self) -> None:
        """Close the OpenAI client.

        See: https://github.com/openai/openai-python#async-usage
        """
        await self._client.close()
