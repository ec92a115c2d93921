"""In-memory conversation store.

Simple dict-based storage for session-only use.
Data is lost when the application exits.
"""

from uuid import UUID

from ..artifacts.models import Artifact, LibraryItem
from ..conversation.models import ConversationTurn, Thread, sort_turns
from ..conversation.preferences import UserPreferences
from .base import ConversationStore, PersistenceError


class InMemoryConversationStore(ConversationStore):
    """In-memory conversation store (session-only).

    Suitable for single-session use or testing.
    """

    def __init__(self) -> None:
        self._threads: dict[UUID, Thread] = {}
        self._turns: dict[UUID, dict[UUID, ConversationTurn]] = {}
        self._artifacts: dict[UUID, Artifact] = {}
        self._library: dict[UUID, LibraryItem] = {}
        self._preferences: UserPreferences | None = None

    async def connect(self) -> None:
        """Initialize store (no-op for in-memory)."""
        pass

    async def disconnect(self) -> None:
        """Close store (no-op for in-memory)."""
        pass

    async def save_thread(self, thread: Thread) -> None:
        self._threads[thread.id] = thread.model_copy()
        self._turns.setdefault(thread.id, {})

    async def get_thread(self, thread_id: UUID) -> Thread | None:
        thread = self._threads.get(thread_id)
        return thread.model_copy() if thread else None

    async def list_threads(self) -> list[Thread]:
        threads = sorted(self._threads.values(), key=lambda t: t.updated_at, reverse=True)
        threads.sort(key=lambda t: not t.pinned)
        return [thread.model_copy() for thread in threads]

    async def delete_thread(self, thread_id: UUID) -> None:
        self._threads.pop(thread_id, None)
        self._turns.pop(thread_id, None)

    async def add_turn(self, turn: ConversationTurn) -> None:
        if turn.thread_id not in self._threads:
            raise PersistenceError(f"Unknown thread: {turn.thread_id}")
        self._turns[turn.thread_id][turn.id] = turn

    async def update_turn(self, turn: ConversationTurn) -> None:
        turns = self._turns.get(turn.thread_id, {})
        if turn.id not in turns:
            raise PersistenceError(f"Unknown turn: {turn.id}")
        turns[turn.id] = turn

    async def get_turns(self, thread_id: UUID) -> list[ConversationTurn]:
        return sort_turns(list(self._turns.get(thread_id, {}).values()))

    async def save_artifact(self, artifact: Artifact) -> None:
        self._artifacts[artifact.id] = artifact.model_copy(deep=True)

    async def get_artifact(self, artifact_id: UUID) -> Artifact | None:
        artifact = self._artifacts.get(artifact_id)
        return artifact.model_copy(deep=True) if artifact else None

    async def list_artifacts(self) -> list[Artifact]:
        artifacts = sorted(self._artifacts.values(), key=lambda a: a.created_at, reverse=True)
        return [artifact.model_copy(deep=True) for artifact in artifacts]

    async def save_library_item(self, item: LibraryItem) -> None:
        self._library[item.id] = item.model_copy()

    async def list_library_items(self) -> list[LibraryItem]:
        items = sorted(self._library.values(), key=lambda i: i.created_at, reverse=True)
        return [item.model_copy() for item in items]

    async def get_preferences(self) -> UserPreferences:
        if self._preferences is None:
            return UserPreferences()
        return self._preferences.model_copy()

    async def save_preferences(self, preferences: UserPreferences) -> None:
        self._preferences = preferences.model_copy()

    @property
    def backend_type(self) -> str:
        return "memory"
