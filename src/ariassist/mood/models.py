"""Data models for Ari's mood layer.

Moods are purely presentational: each carries a fixed label, icon and color.
Coaching actions are ephemeral suggestions regenerated on every update and
never persisted.
"""

from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class Mood(str, Enum):
    """Ari's mood derived from conversation shape."""

    CALM = "calm"
    ENCOURAGING = "encouraging"
    FOCUSED = "focused"
    CELEBRATORY = "celebratory"
    CURIOUS = "curious"
    SUPPORTIVE = "supportive"

    @classmethod
    def from_raw(cls, raw: str | None) -> "Mood | None":
        if raw is None:
            return None
        try:
            return cls(raw)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return _MOOD_STYLE[self][0]

    @property
    def icon(self) -> str:
        return _MOOD_STYLE[self][1]

    @property
    def color(self) -> str:
        return _MOOD_STYLE[self][2]


# label, icon, color
_MOOD_STYLE: dict[Mood, tuple[str, str, str]] = {
    Mood.CALM: ("Calm", "leaf", "teal"),
    Mood.ENCOURAGING: ("Encouraging", "hand.thumbsup", "green"),
    Mood.FOCUSED: ("Focused", "scope", "indigo"),
    Mood.CELEBRATORY: ("Nice work!", "star", "orange"),
    Mood.CURIOUS: ("Curious", "questionmark.bubble", "purple"),
    Mood.SUPPORTIVE: ("Supportive", "heart", "pink"),
}


class CoachingActionKind(str, Enum):
    """What a coaching action does when the user picks it."""

    CREATE_CHECKLIST = "createChecklist"
    REFINE_TONE = "refineTone"
    SAVE_ARTIFACT = "saveArtifact"
    ASK_FOLLOW_UP = "askFollowUp"
    SIMPLIFY = "simplify"


class CoachingAction(BaseModel):
    """A micro-coaching suggestion shown next to Ari's guidance line."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    label: str
    icon: str
    kind: CoachingActionKind


class MoodUpdate(BaseModel):
    """Result of one mood computation."""

    model_config = ConfigDict(frozen=True)

    mood: Mood = Mood.CALM
    guidance: str = ""
    actions: tuple[CoachingAction, ...] = ()

    @classmethod
    def silent(cls) -> "MoodUpdate":
        """State used when Ari is switched off."""
        return cls(mood=Mood.CALM, guidance="", actions=())
