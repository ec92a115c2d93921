from typing import Any

from .openai import OpenAIProvider


class DeepSeekProvider(OpenAIProvider):
    """DeepSeek provider over its OpenAI-compatible API.

    Only the endpoint and default model differ from OpenAI; request building,
    streaming and usage capture are inherited.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "deepseek-chat",
        base_url: str = "https://api.deepseek.com",
        **client_kwargs: Any
    ):
        """Initialize DeepSeek provider.

        Args:
            api_key: DeepSeek API key
            model: Default model ('deepseek-chat' or 'deepseek-reasoner')
            base_url: DeepSeek API base URL
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        super().__init__(api_key=api_key, model=model, base_url=base_url, **client_kwargs)
