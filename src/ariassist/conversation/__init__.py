"""Conversation records: roles, modes, turns, threads and user preferences."""

from .models import (
    ConversationTurn,
    Thread,
    generate_thread_title,
    last_message_preview,
    sort_turns,
)
from .modes import AssistantMode, Role
from .preferences import (
    AriExpressiveness,
    AriVibe,
    OutputStyle,
    UserPreferences,
    Verbosity,
)

__all__ = [
    "AriExpressiveness",
    "AriVibe",
    "AssistantMode",
    "ConversationTurn",
    "OutputStyle",
    "Role",
    "Thread",
    "UserPreferences",
    "Verbosity",
    "generate_thread_title",
    "last_message_preview",
    "sort_turns",
]
