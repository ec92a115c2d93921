"""Pytest configuration and shared fixtures."""
import os
from datetime import datetime, timedelta

import pytest

from ariassist.conversation import (
    AriExpressiveness,
    AriVibe,
    ConversationTurn,
    Role,
    UserPreferences,
)
from ariassist.llm import StubProvider
from ariassist.prompts import clear_cache


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "openai": os.getenv("OPENAI_API_KEY"),
        "deepseek": os.getenv("DEEPSEEK_API_KEY"),
        "anthropic": os.getenv("ANTHROPIC_API_KEY"),
        "gemini": os.getenv("GEMINI_API_KEY"),
    }


@pytest.fixture(autouse=True)
def fresh_prompts():
    """Reload prompt templates for every test."""
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def stub_provider():
    """Return a stub provider with a fixed reply."""
    return StubProvider(responses=["Here is a helpful answer."], chunk_size=5)


@pytest.fixture
def preferences():
    """Return default preferences."""
    return UserPreferences()


@pytest.fixture
def quiet_preferences():
    """Return preferences with Ari switched off."""
    return UserPreferences(ari_enabled=False)


@pytest.fixture
def energetic_preferences():
    """Return preferences for the most expressive Ari."""
    return UserPreferences(ari_expressiveness=AriExpressiveness.HIGH, ari_vibe=AriVibe.ENERGETIC)


@pytest.fixture
def make_history():
    """Return a factory building alternating user/assistant turns."""
    def _make(count: int) -> list[ConversationTurn]:
        start = datetime(2024, 1, 1, 9, 0, 0)
        return [
            ConversationTurn(
                role=Role.USER if i % 2 == 0 else Role.ASSISTANT,
                text=f"message {i}",
                created_at=start + timedelta(minutes=i),
            )
            for i in range(count)
        ]
    return _make


@pytest.fixture
def sample_quiz_text():
    """Return a well-formed quiz in the transform grammar."""
    return """Q: What is the capital of France?
A) Berlin
B) Paris
C) Rome
D) Madrid
Correct: B

Q: Which planet is known as the Red Planet?
A) Mars
B) Venus
C) Jupiter
D) Saturn
Correct: A
"""
