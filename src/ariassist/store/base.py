"""Abstract base class for conversation stores.

This module defines the interface the coordinator persists through.
The abstraction hides:
- Storage format (dicts, SQLite rows)
- How enum values are encoded and decoded
- Connection management
"""

from abc import ABC, abstractmethod
from uuid import UUID

from ..artifacts.models import Artifact, LibraryItem
from ..conversation.models import ConversationTurn, Thread
from ..conversation.preferences import UserPreferences


class PersistenceError(Exception):
    """Raised when a store operation fails.

    Backend-specific errors are wrapped so callers only handle this type.
    """


class ConversationStore(ABC):
    """Abstract persistence backend for threads, turns, artifacts and settings.

    Every method is async. ``get_turns`` always returns turns ordered by
    ``created_at``; deleting a thread deletes its turns.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the store."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the store gracefully."""

    @abstractmethod
    async def save_thread(self, thread: Thread) -> None:
        """Insert or update a thread."""

    @abstractmethod
    async def get_thread(self, thread_id: UUID) -> Thread | None:
        """Fetch a thread by id."""

    @abstractmethod
    async def list_threads(self) -> list[Thread]:
        """List threads, pinned first, then most recently updated."""

    @abstractmethod
    async def delete_thread(self, thread_id: UUID) -> None:
        """Delete a thread and all of its turns."""

    @abstractmethod
    async def add_turn(self, turn: ConversationTurn) -> None:
        """Append a turn to its thread."""

    @abstractmethod
    async def update_turn(self, turn: ConversationTurn) -> None:
        """Replace a stored turn with a new value of the same id."""

    @abstractmethod
    async def get_turns(self, thread_id: UUID) -> list[ConversationTurn]:
        """Turns of a thread, oldest first."""

    @abstractmethod
    async def save_artifact(self, artifact: Artifact) -> None:
        """Insert or update an artifact."""

    @abstractmethod
    async def get_artifact(self, artifact_id: UUID) -> Artifact | None:
        """Fetch an artifact by id."""

    @abstractmethod
    async def list_artifacts(self) -> list[Artifact]:
        """List artifacts, newest first."""

    @abstractmethod
    async def save_library_item(self, item: LibraryItem) -> None:
        """Insert or update a library item."""

    @abstractmethod
    async def list_library_items(self) -> list[LibraryItem]:
        """List library items, newest first."""

    @abstractmethod
    async def get_preferences(self) -> UserPreferences:
        """Stored preferences, or defaults if none were saved."""

    @abstractmethod
    async def save_preferences(self, preferences: UserPreferences) -> None:
        """Persist the single preferences record."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""

    async def __aenter__(self) -> "ConversationStore":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()
