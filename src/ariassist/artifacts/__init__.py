"""Artifacts: saved outputs, transform kinds and structured-text parsing."""

from .models import (
    Artifact,
    ArtifactKind,
    ArtifactSuggestion,
    LibraryItem,
    LibraryItemKind,
    TransformType,
)
from .parsers import (
    BulletSection,
    Flashcard,
    QuizOption,
    QuizQuestion,
    format_bullets,
    format_flashcards,
    format_quiz,
    parse_bullets,
    parse_flashcards,
    parse_quiz,
)
from .schemas import (
    ChecklistSchema,
    DraftSchema,
    FlashcardSchema,
    PlanSchema,
    QuizSchema,
    SummarySchema,
    TableSchema,
)

__all__ = [
    "Artifact",
    "ArtifactKind",
    "ArtifactSuggestion",
    "BulletSection",
    "ChecklistSchema",
    "DraftSchema",
    "Flashcard",
    "FlashcardSchema",
    "LibraryItem",
    "LibraryItemKind",
    "PlanSchema",
    "QuizOption",
    "QuizQuestion",
    "QuizSchema",
    "SummarySchema",
    "TableSchema",
    "TransformType",
    "format_bullets",
    "format_flashcards",
    "format_quiz",
    "parse_bullets",
    "parse_flashcards",
    "parse_quiz",
]
