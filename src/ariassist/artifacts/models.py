"""Data models for saved outputs and library material.

Unknown stored kinds decode to ``ArtifactKind.OTHER`` and
``LibraryItemKind.NOTE``.
"""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class ArtifactKind(str, Enum):
    """The kind of output the assistant produced."""

    DRAFT = "Draft"
    SUMMARY = "Summary"
    CHECKLIST = "Checklist"
    PLAN = "Plan"
    QUIZ = "Quiz"
    FLASHCARDS = "Flashcards"
    OTHER = "Other"

    @classmethod
    def from_raw(cls, raw: str | None) -> "ArtifactKind":
        try:
            return cls(raw)
        except ValueError:
            return cls.OTHER

    @property
    def icon(self) -> str:
        return _ARTIFACT_ICONS[self]


_ARTIFACT_ICONS = {
    ArtifactKind.DRAFT: "doc.text",
    ArtifactKind.SUMMARY: "doc.plaintext",
    ArtifactKind.CHECKLIST: "checklist",
    ArtifactKind.PLAN: "list.bullet.clipboard",
    ArtifactKind.QUIZ: "questionmark.circle",
    ArtifactKind.FLASHCARDS: "rectangle.on.rectangle.angled",
    ArtifactKind.OTHER: "square.stack",
}


class TransformType(str, Enum):
    """Single-shot rewrites available for existing content."""

    SHORTER = "Shorter"
    MORE_FORMAL = "More Formal"
    BULLETS = "Bullets"
    QUIZ = "Quiz"
    FLASHCARDS = "Flashcards"

    @property
    def prompt_name(self) -> str:
        """Name of the prompt template implementing this transform."""
        return "transform_" + self.name.lower()

    def result_kind(self, source: ArtifactKind) -> ArtifactKind:
        """Kind of the artifact produced by applying this transform to ``source``."""
        if self in (TransformType.SHORTER, TransformType.MORE_FORMAL):
            return source
        if self == TransformType.BULLETS:
            return ArtifactKind.CHECKLIST
        if self == TransformType.QUIZ:
            return ArtifactKind.QUIZ
        return ArtifactKind.FLASHCARDS


class ArtifactSuggestion(BaseModel):
    """A proposed artifact. Not persisted until the caller accepts it."""

    model_config = ConfigDict(frozen=True)

    kind: ArtifactKind
    title: str
    content: str
    tags: tuple[str, ...] = ()


class Artifact(BaseModel):
    """A saved output."""

    id: UUID = Field(default_factory=uuid4)
    kind: ArtifactKind = ArtifactKind.OTHER
    title: str = ""
    content: str = ""
    tags: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    source_thread_id: UUID | None = None
    source_turn_id: UUID | None = None

    @classmethod
    def from_suggestion(
        cls,
        suggestion: ArtifactSuggestion,
        source_thread_id: UUID | None = None,
        source_turn_id: UUID | None = None,
    ) -> "Artifact":
        return cls(
            kind=suggestion.kind,
            title=suggestion.title,
            content=suggestion.content,
            tags=list(suggestion.tags),
            source_thread_id=source_thread_id,
            source_turn_id=source_turn_id,
        )


class LibraryItemKind(str, Enum):
    NOTE = "Note"
    SNIPPET = "Snippet"
    PASTED = "Pasted"

    @classmethod
    def from_raw(cls, raw: str | None) -> "LibraryItemKind":
        try:
            return cls(raw)
        except ValueError:
            return cls.NOTE


class LibraryItem(BaseModel):
    """User-added source material that can be summarized."""

    id: UUID = Field(default_factory=uuid4)
    title: str = ""
    kind: LibraryItemKind = LibraryItemKind.NOTE
    raw_text: str = ""
    ai_summary: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
