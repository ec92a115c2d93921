from .base import GenerationProvider
from .factory import create_provider
from .models import ChatMessage, ProviderResponse, SnapshotStream
from .providers import (
    AnthropicProvider,
    DeepSeekProvider,
    GeminiProvider,
    OpenAIProvider,
    StubProvider,
)

__all__ = [
    "GenerationProvider",
    "create_provider",
    "ChatMessage",
    "ProviderResponse",
    "SnapshotStream",
    "AnthropicProvider",
    "DeepSeekProvider",
    "GeminiProvider",
    "OpenAIProvider",
    "StubProvider",
]
