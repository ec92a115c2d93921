"""Prompt assembly for chat generation."""

from collections.abc import Sequence

from ..config import CONTEXT_TURN_LIMIT
from ..conversation.models import ConversationTurn
from ..conversation.modes import AssistantMode, Role
from ..conversation.preferences import UserPreferences, Verbosity

ARI_IDENTITY = "You are Ari, a warm and supportive assistant. "
PLAIN_IDENTITY = "You are a warm and supportive assistant. "

VERBOSITY_INSTRUCTIONS = {
    Verbosity.CONCISE: "Keep responses concise and to the point. ",
    Verbosity.BALANCED: "Provide balanced responses with enough detail to be helpful. ",
    Verbosity.DETAILED: "Provide thorough, detailed responses. ",
}

MODE_INSTRUCTIONS = {
    AssistantMode.WRITE: "Help the user write, draft, and compose text. Produce polished output.",
    AssistantMode.SUMMARIZE: "Summarize the provided content clearly and concisely.",
    AssistantMode.EXPLAIN: "Explain the topic clearly, using analogies when helpful.",
    AssistantMode.PLAN: "Create structured plans with clear phases and actionable tasks.",
    AssistantMode.BRAINSTORM: "Generate creative ideas and alternatives. Be exploratory.",
    AssistantMode.GENERAL: "Help with whatever the user needs. Be clear and supportive.",
}

ATTACHMENT_LABEL = "Attached file content:"


def build_system_prompt(mode: AssistantMode, preferences: UserPreferences) -> str:
    """Identity, verbosity and mode instructions for one generation."""
    identity = ARI_IDENTITY if preferences.ari_enabled else PLAIN_IDENTITY
    return identity + VERBOSITY_INSTRUCTIONS[preferences.verbosity] + MODE_INSTRUCTIONS[mode]


def build_conversation_context(
    history: Sequence[ConversationTurn],
    limit: int = CONTEXT_TURN_LIMIT,
) -> str:
    """Render the most recent turns, oldest first, one block per turn.

    User turns are labelled ``User``; every other role is labelled
    ``Assistant``.
    """
    recent = list(history)[-limit:] if limit > 0 else []
    blocks = []
    for turn in recent:
        label = "User" if turn.role == Role.USER else "Assistant"
        blocks.append(f"{label}: {turn.text}")
    return "\n\n".join(blocks)


def build_prompt(
    user_input: str,
    context: str,
    attachment_context: str | None = None,
) -> str:
    parts = []
    if context:
        parts.append(context)
    if attachment_context:
        parts.append(f"{ATTACHMENT_LABEL}\n{attachment_context}")
    parts.append(f"User: {user_input}")
    return "\n\n".join(parts)
