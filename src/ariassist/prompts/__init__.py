"""Prompt management module.

Externalizes prompts to text files for easy customization.
Prompts can be overridden by placing files in the working directory.

Transform templates pin the exact output grammar that
``ariassist.artifacts.parsers`` reads back, so edits to them should keep the
``Q:`` / ``A)`` / ``Correct:`` / ``• `` / ``## `` markers intact.
"""

from functools import lru_cache
from pathlib import Path

# Default prompts directory (package location)
_PROMPTS_DIR = Path(__file__).parent


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Load a prompt from file.

    Search order:
    1. Current working directory: ./prompts/{name}.txt
    2. Package prompts directory: ariassist/prompts/{name}.txt

    Args:
        name: Prompt name (without .txt extension)

    Returns:
        Prompt text content, surrounding whitespace removed

    Raises:
        FileNotFoundError: If prompt file not found in any location
    """
    filename = f"{name}.txt"

    local_path = Path.cwd() / "prompts" / filename
    if local_path.exists():
        return local_path.read_text(encoding="utf-8").strip()

    package_path = _PROMPTS_DIR / filename
    if package_path.exists():
        return package_path.read_text(encoding="utf-8").strip()

    raise FileNotFoundError(
        f"Prompt '{name}' not found. Searched:\n"
        f"  - {local_path}\n"
        f"  - {package_path}"
    )


def render_prompt(name: str, content: str) -> str:
    """Load a template and substitute the ``{content}`` placeholder."""
    return load_prompt(name).format(content=content)


def get_transform_instructions() -> str:
    """System instructions shared by every transform."""
    return load_prompt("transform_system")


def clear_cache() -> None:
    """Clear the prompt cache (useful after modifying prompt files)."""
    load_prompt.cache_clear()


__all__ = [
    "clear_cache",
    "get_transform_instructions",
    "load_prompt",
    "render_prompt",
]
