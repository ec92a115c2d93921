"""Turn roles and assistant modes.

Enum raw values match what the persistence layer stores. Each enum decodes
stored strings through ``from_raw`` so an unknown value never fails a load;
the fallbacks are part of the storage contract:

- unknown role decodes to ``Role.USER``
- unknown mode decodes to ``None`` (the turn simply carries no mode)
"""

from enum import Enum


class Role(str, Enum):
    """Author of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"

    @classmethod
    def from_raw(cls, raw: str | None) -> "Role":
        try:
            return cls(raw)
        except ValueError:
            return cls.USER


class AssistantMode(str, Enum):
    """Classified intent of a user turn."""

    GENERAL = "General"
    WRITE = "Write"
    SUMMARIZE = "Summarize"
    EXPLAIN = "Explain"
    PLAN = "Plan"
    BRAINSTORM = "Brainstorm"

    @classmethod
    def from_raw(cls, raw: str | None) -> "AssistantMode | None":
        if raw is None:
            return None
        try:
            return cls(raw)
        except ValueError:
            return None

    @property
    def icon(self) -> str:
        return _MODE_ICONS[self]

    @property
    def chip_label(self) -> str:
        return self.value


_MODE_ICONS = {
    AssistantMode.WRITE: "pencil.line",
    AssistantMode.SUMMARIZE: "doc.plaintext",
    AssistantMode.EXPLAIN: "lightbulb",
    AssistantMode.PLAN: "list.bullet.clipboard",
    AssistantMode.BRAINSTORM: "brain.head.profile",
    AssistantMode.GENERAL: "bubble.left",
}
