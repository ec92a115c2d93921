"""
ariassist: response orchestration for Ari, a supportive writing and study assistant.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

from loguru import logger

__version__ = "0.1.0"

from .artifacts import (
    Artifact,
    ArtifactKind,
    ArtifactSuggestion,
    LibraryItem,
    TransformType,
    parse_bullets,
    parse_flashcards,
    parse_quiz,
)
from .conversation import (
    AssistantMode,
    ConversationTurn,
    Role,
    Thread,
    UserPreferences,
)
from .coordinator import ConversationCoordinator, TurnOutcome
from .engine import (
    EngineBusyError,
    EngineState,
    GenerationOrchestrator,
    GenerationResult,
    classify_intent,
)
from .llm import GenerationProvider, create_provider
from .mood import Mood, MoodEngine, MoodUpdate
from .store import ConversationStore, PersistenceError, create_conversation_store

# Silent until an application calls ariassist.log.setup_logger
logger.disable("ariassist")

__all__ = [
    "Artifact",
    "ArtifactKind",
    "ArtifactSuggestion",
    "AssistantMode",
    "ConversationCoordinator",
    "ConversationStore",
    "ConversationTurn",
    "EngineBusyError",
    "EngineState",
    "GenerationOrchestrator",
    "GenerationProvider",
    "GenerationResult",
    "LibraryItem",
    "Mood",
    "MoodEngine",
    "MoodUpdate",
    "PersistenceError",
    "Role",
    "Thread",
    "TransformType",
    "TurnOutcome",
    "UserPreferences",
    "classify_intent",
    "create_conversation_store",
    "create_provider",
    "parse_bullets",
    "parse_flashcards",
    "parse_quiz",
]
