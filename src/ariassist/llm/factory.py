from typing import Any

from .base import GenerationProvider
from .providers import (
    AnthropicProvider,
    DeepSeekProvider,
    GeminiProvider,
    OpenAIProvider,
    StubProvider,
)

_KEYED_PROVIDERS: dict[str, type[GenerationProvider]] = {
    "openai": OpenAIProvider,
    "deepseek": DeepSeekProvider,
    "anthropic": AnthropicProvider,
    "claude": AnthropicProvider,
    "gemini": GeminiProvider,
}


def create_provider(provider: str, **config: Any) -> GenerationProvider:
    """Create a generation provider instance.

    This factory function hides the instantiation logic for different backends.

    Args:
        provider: Provider type ('openai', 'deepseek', 'anthropic', 'gemini', 'stub')
        **config: Provider-specific configuration
            For OpenAI / DeepSeek / Anthropic / Gemini:
                - api_key: str (required)
                - model: str (optional, provider default otherwise)
                - base_url: str | None (OpenAI, DeepSeek, Anthropic)
            For Stub:
                - responses: list[str] | None
                - chunk_size: int (default: 8)
                - delay: float (default: 0.0)

    Returns:
        Initialized provider instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> provider = create_provider("openai", api_key="sk-...", model="gpt-4o-mini")
        >>> provider = create_provider("stub", responses=["Hello!"])
    """
    provider_lower = provider.lower()

    if provider_lower == "stub":
        return StubProvider(**config)

    provider_cls = _KEYED_PROVIDERS.get(provider_lower)
    if provider_cls is None:
        raise ValueError(
            f"Unsupported provider: {provider}. "
            f"Supported providers: 'openai', 'deepseek', 'anthropic', 'gemini', 'stub'"
        )

    if "api_key" not in config:
        raise TypeError(f"{provider_cls.__name__} requires 'api_key' in config")

    return provider_cls(**config)
