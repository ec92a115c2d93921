"""Provider factory functions for CLI.

Centralizes creation of the generation provider and conversation store from
environment variables. Hides configuration details from command
implementations.
"""

import os

from rich.console import Console

from ..llm import GenerationProvider, create_provider
from ..store import ConversationStore, create_conversation_store

# Default console for output
_console = Console()

_API_KEY_VARIABLES = {
    "openai": "OPENAI_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "claude": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
}

_MODEL_VARIABLES = {
    "openai": ("OPENAI_CHAT_MODEL", "gpt-4o-mini"),
    "anthropic": ("ANTHROPIC_MODEL", "claude-sonnet-4-20250514"),
    "claude": ("ANTHROPIC_MODEL", "claude-sonnet-4-20250514"),
    "gemini": ("GEMINI_MODEL", "gemini-2.5-flash"),
}


class ProviderNotConfiguredError(Exception):
    """Raised when the environment does not describe a usable provider."""


def get_provider(name: str | None = None) -> GenerationProvider:
    """Create a generation provider from environment variables.

    Args:
        name: Provider name; defaults to ``ARI_PROVIDER``

    Returns:
        Generation provider instance

    Raises:
        ProviderNotConfiguredError: If the provider is unknown or its API key
            is not set

    Environment variables:
        ARI_PROVIDER: Provider type (openai, deepseek, anthropic, gemini, stub; default: stub)
        OPENAI_API_KEY: OpenAI API key (for openai provider)
        OPENAI_CHAT_MODEL: OpenAI model (default: gpt-4o-mini)
        DEEPSEEK_API_KEY: DeepSeek API key (for deepseek provider)
        ANTHROPIC_API_KEY: Anthropic API key (for anthropic provider)
        ANTHROPIC_MODEL: Anthropic model (default: claude-sonnet-4-20250514)
        GEMINI_API_KEY: Gemini API key (for gemini provider)
        GEMINI_MODEL: Gemini model (default: gemini-2.5-flash)
    """
    provider = (name or os.getenv("ARI_PROVIDER", "stub")).lower()

    if provider == "stub":
        return create_provider("stub", chunk_size=4, delay=0.02)

    key_variable = _API_KEY_VARIABLES.get(provider)
    if key_variable is None:
        raise ProviderNotConfiguredError(f"Unknown provider: {provider}")

    api_key = os.getenv(key_variable)
    if not api_key:
        raise ProviderNotConfiguredError(f"{key_variable} not set in environment")

    config = {"api_key": api_key}
    if provider in _MODEL_VARIABLES:
        model_variable, default_model = _MODEL_VARIABLES[provider]
        config["model"] = os.getenv(model_variable, default_model)
    return create_provider(provider, **config)


def require_provider(name: str | None = None, console: Console | None = None) -> GenerationProvider:
    """Get the generation provider, exiting if it is not configured.

    Raises:
        SystemExit: If the provider is not configured
    """
    import typer

    con = console or _console
    try:
        return get_provider(name)
    except ProviderNotConfiguredError as e:
        con.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


def get_store() -> ConversationStore:
    """Create the conversation store from environment variables.

    Environment variables:
        ARI_STORE: Store backend, 'memory' or 'sqlite' (default: sqlite)
        ARI_DB_PATH: SQLite database path (default: ~/.ariassist/ari.db)
    """
    backend = os.getenv("ARI_STORE", "sqlite").lower()
    if backend == "sqlite":
        default_path = os.path.join(os.path.expanduser("~"), ".ariassist", "ari.db")
        return create_conversation_store("sqlite", path=os.getenv("ARI_DB_PATH", default_path))
    return create_conversation_store(backend)
