"""User preferences driving prompt assembly and Ari's guidance.

Stored preferences decode with fixed defaults for unknown values:
expressiveness -> medium, vibe -> neutral, verbosity -> balanced,
output style -> structured.
"""

from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator


class AriExpressiveness(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def numeric_value(self) -> float:
        return {"Low": 0.3, "Medium": 0.6, "High": 1.0}[self.value]


class AriVibe(str, Enum):
    CALM = "Calm"
    ENERGETIC = "Energetic"
    NEUTRAL = "Neutral"

    @property
    def emoji(self) -> str:
        return {"Calm": "🌊", "Energetic": "⚡", "Neutral": "☁️"}[self.value]


class Verbosity(str, Enum):
    CONCISE = "Concise"
    BALANCED = "Balanced"
    DETAILED = "Detailed"


class OutputStyle(str, Enum):
    PROSE = "Prose"
    STRUCTURED = "Structured"
    MINIMAL = "Minimal"


def _decode(enum_cls: type[Enum], raw: object, default: Enum) -> Enum:
    if isinstance(raw, enum_cls):
        return raw
    try:
        return enum_cls(raw)
    except (ValueError, TypeError):
        return default


class UserPreferences(BaseModel):
    """Ari settings and assistant defaults. One record per user."""

    id: UUID = Field(default_factory=uuid4)
    ari_enabled: bool = True
    ari_expressiveness: AriExpressiveness = AriExpressiveness.MEDIUM
    ari_vibe: AriVibe = AriVibe.NEUTRAL
    verbosity: Verbosity = Verbosity.BALANCED
    output_style: OutputStyle = OutputStyle.STRUCTURED

    @field_validator("ari_expressiveness", mode="before")
    @classmethod
    def _expressiveness(cls, value: object) -> AriExpressiveness:
        return _decode(AriExpressiveness, value, AriExpressiveness.MEDIUM)

    @field_validator("ari_vibe", mode="before")
    @classmethod
    def _vibe(cls, value: object) -> AriVibe:
        return _decode(AriVibe, value, AriVibe.NEUTRAL)

    @field_validator("verbosity", mode="before")
    @classmethod
    def _verbosity(cls, value: object) -> Verbosity:
        return _decode(Verbosity, value, Verbosity.BALANCED)

    @field_validator("output_style", mode="before")
    @classmethod
    def _output_style(cls, value: object) -> OutputStyle:
        return _decode(OutputStyle, value, OutputStyle.STRUCTURED)
