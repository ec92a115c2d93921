"""Generation engine: intent routing, prompt assembly and the orchestrator."""

from .classifier import INTENT_KEYWORDS, classify_intent
from .orchestrator import GenerationOrchestrator, suggest_artifact
from .prompt_builder import build_conversation_context, build_prompt, build_system_prompt
from .state import (
    CancellationToken,
    EngineBusyError,
    EngineSnapshot,
    EngineState,
    EngineStatus,
    GenerationResult,
)

__all__ = [
    "INTENT_KEYWORDS",
    "CancellationToken",
    "EngineBusyError",
    "EngineSnapshot",
    "EngineState",
    "EngineStatus",
    "GenerationOrchestrator",
    "GenerationResult",
    "build_conversation_context",
    "build_prompt",
    "build_system_prompt",
    "classify_intent",
    "suggest_artifact",
]
