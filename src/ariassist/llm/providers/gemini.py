"""Google Gemini generation provider.

Uses the official Google GenAI SDK.
Reference: https://github.com/googleapis/python-genai

Note: Gemini can return empty responses due to safety filtering or service
issues, so single-shot calls retry a few times before giving up.
"""

import asyncio
from collections.abc import AsyncIterator, Callable
from typing import Any

from google import genai
from google.genai import types

from ..base import GenerationProvider
from ..models import ProviderResponse, SnapshotStream


class GeminiProvider(GenerationProvider):
    """Google Gemini generation provider.

    Hidden design decisions:
    - Instructions map to ``system_instruction`` in the generation config
    - Retry with linear backoff on empty single-shot responses
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        max_retries: int = 3,
        **client_kwargs: Any
    ):
        self._model = model
        self._max_retries = max_retries
        self._client = genai.Client(api_key=api_key, **client_kwargs)

    @property
    def model(self) -> str:
        return self._model

    def _config(
        self,
        instructions: str | None,
        temperature: float,
        max_tokens: int | None,
        **kwargs: Any
    ) -> types.GenerateContentConfig:
        config = types.GenerateContentConfig(
            temperature=temperature,
            system_instruction=instructions,
            **kwargs
        )
        if max_tokens is not None:
            config.max_output_tokens = max_tokens
        return config

    @staticmethod
    def _contents(prompt: str) -> list[types.Content]:
        return [types.Content(role="user", parts=[types.Part(text=prompt)])]

    @staticmethod
    def _extract_text(response: Any) -> str:
        """Extract text from a response or stream chunk, tolerating empty candidates."""
        if response.candidates:
            candidate = response.candidates[0]
            if candidate.content and candidate.content.parts:
                texts = [part.text for part in candidate.content.parts if getattr(part, "text", None)]
                if texts:
                    return "".join(texts)
        try:
            return response.text or ""
        except (ValueError, AttributeError):
            return ""

    @staticmethod
    def _usage(metadata: Any) -> dict[str, int]:
        return {
            "prompt_tokens": metadata.prompt_token_count or 0,
            "completion_tokens": metadata.candidates_token_count or 0,
            "total_tokens": metadata.total_token_count or 0,
        }

    async def respond(
        self,
        prompt: str,
        instructions: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> ProviderResponse:
        """Generate a single-shot response, retrying empty answers."""
        config = self._config(instructions, temperature, max_tokens, **kwargs)
        content = ""
        usage = None

        for attempt in range(self._max_retries):
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=self._contents(prompt),
                config=config
            )
            if response.usage_metadata:
                usage = self._usage(response.usage_metadata)

            content = self._extract_text(response)
            if content:
                break

            if attempt < self._max_retries - 1:
                await asyncio.sleep(0.5 * (attempt + 1))

        return ProviderResponse(content=content, model=self._model, usage=usage)

    async def stream_response(
        self,
        prompt: str,
        instructions: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> SnapshotStream:
        """Start a streaming generation with Gemini."""
        config = self._config(instructions, temperature, max_tokens, **kwargs)
        stream = SnapshotStream(
            self._delta_generator(prompt, config, lambda usage: stream.set_usage(usage))
        )
        return stream

    async def _delta_generator(
        self,
        prompt: str,
        config: types.GenerateContentConfig,
        on_usage: Callable[[dict[str, int]], None],
    ) -> AsyncIterator[str]:
        usage = None

        stream = await self._client.aio.models.generate_content_stream(
            model=self._model, contents=self._contents(prompt), config=config
        )
        async for chunk in stream:
            if chunk.usage_metadata:
                usage = self._usage(chunk.usage_metadata)
            text = self._extract_text(chunk)
            if text:
                yield text

        if usage:
            on_usage(usage)

    async def close(self) -> None:
        """Nothing to release; the GenAI client has no explicit close."""
