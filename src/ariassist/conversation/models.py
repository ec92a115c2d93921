"""Data models for conversation threads and turns."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from ..config import THREAD_TITLE_CUT_LENGTH, THREAD_TITLE_MAX_LENGTH
from ..mood.models import Mood
from .modes import AssistantMode, Role


class ConversationTurn(BaseModel):
    """One message in a thread. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    thread_id: UUID | None = Field(default=None, description="Owning thread")
    role: Role = Role.USER
    text: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
    mode: AssistantMode | None = Field(default=None, description="Mode assigned when the turn was created")
    ari_guidance: str | None = None
    ari_mood: Mood | None = None
    artifact_ids: tuple[UUID, ...] = Field(default=(), description="Artifacts produced from this turn")

    def with_artifact(self, artifact_id: UUID) -> "ConversationTurn":
        """Return a copy of this turn that references one more artifact."""
        return self.model_copy(update={"artifact_ids": (*self.artifact_ids, artifact_id)})


class Thread(BaseModel):
    """A conversation thread; turns are stored separately and ordered by time."""

    id: UUID = Field(default_factory=uuid4)
    title: str = "New Chat"
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    pinned: bool = False

    def touch(self) -> None:
        self.updated_at = datetime.now()


def sort_turns(turns: list[ConversationTurn]) -> list[ConversationTurn]:
    """Order turns by creation time, oldest first."""
    return sorted(turns, key=lambda turn: turn.created_at)


def last_message_preview(turns: list[ConversationTurn], limit: int = 80) -> str:
    ordered = sort_turns(turns)
    if not ordered:
        return "No messages yet"
    return ordered[-1].text[:limit]


def generate_thread_title(text: str) -> str:
    """Derive a thread title from the first user message.

    Short messages are used as-is. Longer ones are cut to a prefix, the last
    (possibly partial) word is dropped and an ellipsis appended.
    """
    trimmed = text.strip()
    if len(trimmed) <= THREAD_TITLE_MAX_LENGTH:
        return trimmed
    words = trimmed[:THREAD_TITLE_CUT_LENGTH].split()
    return " ".join(words[:-1]) + "…"
