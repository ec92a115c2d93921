"""Conversation persistence for ariassist.

Stores threads, turns, artifacts, library items and preferences.
"""

from .base import ConversationStore, PersistenceError
from .factory import create_conversation_store
from .in_memory import InMemoryConversationStore

__all__ = [
    "ConversationStore",
    "InMemoryConversationStore",
    "PersistenceError",
    "create_conversation_store",
]
