"""State machine values for the generation orchestrator.

A generation moves through::

    idle -> routing -> generating -> streaming(text)* -> complete | error -> idle

``EngineState`` is a tagged value: ``status`` names the state, and only
``streaming`` carries ``partial_text`` and only ``error`` carries ``message``.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from ..artifacts.models import ArtifactSuggestion
from ..conversation.modes import AssistantMode
from ..mood.models import Mood


class EngineStatus(str, Enum):
    IDLE = "idle"
    ROUTING = "routing"
    GENERATING = "generating"
    STREAMING = "streaming"
    COMPLETE = "complete"
    ERROR = "error"


class EngineState(BaseModel):
    """Current step of the orchestrator."""

    model_config = ConfigDict(frozen=True)

    status: EngineStatus = EngineStatus.IDLE
    partial_text: str | None = None
    message: str | None = None

    @classmethod
    def idle(cls) -> "EngineState":
        return cls(status=EngineStatus.IDLE)

    @classmethod
    def routing(cls) -> "EngineState":
        return cls(status=EngineStatus.ROUTING)

    @classmethod
    def generating(cls) -> "EngineState":
        return cls(status=EngineStatus.GENERATING)

    @classmethod
    def streaming(cls, partial_text: str) -> "EngineState":
        return cls(status=EngineStatus.STREAMING, partial_text=partial_text)

    @classmethod
    def complete(cls) -> "EngineState":
        return cls(status=EngineStatus.COMPLETE)

    @classmethod
    def error(cls, message: str) -> "EngineState":
        return cls(status=EngineStatus.ERROR, message=message)

    @property
    def is_active(self) -> bool:
        """True while a generation is in flight."""
        return self.status in (EngineStatus.ROUTING, EngineStatus.GENERATING, EngineStatus.STREAMING)


class EngineSnapshot(BaseModel):
    """Read-only copy of everything a UI needs to render engine activity."""

    model_config = ConfigDict(frozen=True)

    state: EngineState
    streaming_text: str = ""
    is_transforming: bool = False

    @property
    def is_generating(self) -> bool:
        return self.state.is_active


class GenerationResult(BaseModel):
    """Outcome of one chat generation.

    ``ari_guidance`` and ``ari_mood`` are left empty by the orchestrator and
    filled in by the coordinator from the mood engine.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    mode: AssistantMode
    suggested_artifact: ArtifactSuggestion | None = None
    ari_guidance: str | None = None
    ari_mood: Mood | None = None
    failed: bool = False


class EngineBusyError(RuntimeError):
    """Raised when a caller starts work the orchestrator is already doing."""


class CancellationToken:
    """Cooperative cancellation flag checked between stream deliveries."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
