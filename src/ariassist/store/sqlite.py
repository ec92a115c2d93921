"""SQLite conversation store.

Provides persistent storage using a SQLite database file.
Uses aiosqlite for async access.

Enum fields are stored as their raw string values and decoded with each
enum's ``from_raw`` fallback, so rows written by other versions of the app
still load.
"""

import json
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from uuid import UUID

import aiosqlite
from loguru import logger

from ..artifacts.models import Artifact, ArtifactKind, LibraryItem, LibraryItemKind
from ..conversation.models import ConversationTurn, Thread
from ..conversation.modes import AssistantMode, Role
from ..conversation.preferences import UserPreferences
from ..mood.models import Mood
from .base import ConversationStore, PersistenceError

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS threads (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        pinned INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS turns (
        id TEXT PRIMARY KEY,
        thread_id TEXT NOT NULL,
        role TEXT NOT NULL,
        text TEXT NOT NULL,
        created_at TEXT NOT NULL,
        mode TEXT,
        ari_guidance TEXT,
        ari_mood TEXT,
        artifact_ids TEXT DEFAULT '[]',
        FOREIGN KEY (thread_id) REFERENCES threads(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_turns_thread
    ON turns(thread_id, created_at)
    """,
    """
    CREATE TABLE IF NOT EXISTS artifacts (
        id TEXT PRIMARY KEY,
        kind TEXT NOT NULL,
        title TEXT NOT NULL,
        content TEXT NOT NULL,
        tags TEXT DEFAULT '[]',
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        source_thread_id TEXT,
        source_turn_id TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS library_items (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        kind TEXT NOT NULL,
        raw_text TEXT NOT NULL,
        ai_summary TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS preferences (
        id TEXT PRIMARY KEY,
        ari_enabled INTEGER NOT NULL,
        ari_expressiveness TEXT,
        ari_vibe TEXT,
        verbosity TEXT,
        output_style TEXT
    )
    """,
)

_TURN_COLUMNS = "id, thread_id, role, text, created_at, mode, ari_guidance, ari_mood, artifact_ids"
_ARTIFACT_COLUMNS = (
    "id, kind, title, content, tags, created_at, updated_at, source_thread_id, source_turn_id"
)
_LIBRARY_COLUMNS = "id, title, kind, raw_text, ai_summary, created_at, updated_at"


def _uuid_or_none(raw: str | None) -> UUID | None:
    return UUID(raw) if raw else None


def _str_or_none(value: UUID | None) -> str | None:
    return str(value) if value is not None else None


class SQLiteConversationStore(ConversationStore):
    """SQLite-backed conversation store.

    Supports persistent storage across sessions. Every backend error is
    re-raised as ``PersistenceError``.
    """

    def __init__(self, path: str | Path = "./ari.db"):
        self._db_path = Path(path)
        self._connection: aiosqlite.Connection | None = None

    @contextmanager
    def _guard(self, operation: str) -> Iterator[aiosqlite.Connection]:
        if self._connection is None:
            raise PersistenceError(f"Cannot {operation}: store is not connected")
        try:
            yield self._connection
        except (aiosqlite.Error, ValueError) as e:
            logger.error(f"SQLite store failed to {operation}: {e}")
            raise PersistenceError(f"Failed to {operation}: {e}") from e

    async def connect(self) -> None:
        """Initialize database connection and schema."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = await aiosqlite.connect(self._db_path)
            await self._connection.execute("PRAGMA foreign_keys = ON")
            for statement in _SCHEMA:
                await self._connection.execute(statement)
            await self._connection.commit()
        except (aiosqlite.Error, OSError) as e:
            raise PersistenceError(f"Failed to open {self._db_path}: {e}") from e
        logger.debug(f"SQLite store connected at {self._db_path}")

    async def disconnect(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    # Threads

    async def save_thread(self, thread: Thread) -> None:
        with self._guard("save thread") as db:
            await db.execute(
                """
                INSERT INTO threads (id, title, created_at, updated_at, pinned)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title = excluded.title,
                    updated_at = excluded.updated_at,
                    pinned = excluded.pinned
                """,
                (
                    str(thread.id),
                    thread.title,
                    thread.created_at.isoformat(),
                    thread.updated_at.isoformat(),
                    int(thread.pinned),
                ),
            )
            await db.commit()

    async def get_thread(self, thread_id: UUID) -> Thread | None:
        with self._guard("load thread") as db:
            async with db.execute(
                "SELECT id, title, created_at, updated_at, pinned FROM threads WHERE id = ?",
                (str(thread_id),),
            ) as cursor:
                row = await cursor.fetchone()
            return self._thread_from_row(row) if row else None

    async def list_threads(self) -> list[Thread]:
        with self._guard("list threads") as db:
            async with db.execute(
                """
                SELECT id, title, created_at, updated_at, pinned
                FROM threads
                ORDER BY pinned DESC, updated_at DESC
                """
            ) as cursor:
                rows = await cursor.fetchall()
            return [self._thread_from_row(row) for row in rows]

    async def delete_thread(self, thread_id: UUID) -> None:
        with self._guard("delete thread") as db:
            await db.execute("DELETE FROM threads WHERE id = ?", (str(thread_id),))
            await db.commit()

    @staticmethod
    def _thread_from_row(row: tuple) -> Thread:
        thread_id, title, created_at, updated_at, pinned = row
        return Thread(
            id=UUID(thread_id),
            title=title,
            created_at=datetime.fromisoformat(created_at),
            updated_at=datetime.fromisoformat(updated_at),
            pinned=bool(pinned),
        )

    # Turns

    async def add_turn(self, turn: ConversationTurn) -> None:
        with self._guard("add turn") as db:
            await db.execute(
                f"INSERT INTO turns ({_TURN_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                self._turn_values(turn),
            )
            await db.commit()

    async def update_turn(self, turn: ConversationTurn) -> None:
        with self._guard("update turn") as db:
            values = self._turn_values(turn)
            cursor = await db.execute(
                """
                UPDATE turns SET
                    thread_id = ?, role = ?, text = ?, created_at = ?, mode = ?,
                    ari_guidance = ?, ari_mood = ?, artifact_ids = ?
                WHERE id = ?
                """,
                (*values[1:], values[0]),
            )
            if cursor.rowcount == 0:
                raise PersistenceError(f"Unknown turn: {turn.id}")
            await db.commit()

    async def get_turns(self, thread_id: UUID) -> list[ConversationTurn]:
        with self._guard("load turns") as db:
            async with db.execute(
                f"SELECT {_TURN_COLUMNS} FROM turns WHERE thread_id = ? ORDER BY created_at ASC, rowid ASC",
                (str(thread_id),),
            ) as cursor:
                rows = await cursor.fetchall()
            return [self._turn_from_row(row) for row in rows]

    @staticmethod
    def _turn_values(turn: ConversationTurn) -> tuple:
        return (
            str(turn.id),
            _str_or_none(turn.thread_id),
            turn.role.value,
            turn.text,
            turn.created_at.isoformat(),
            turn.mode.value if turn.mode else None,
            turn.ari_guidance,
            turn.ari_mood.value if turn.ari_mood else None,
            json.dumps([str(artifact_id) for artifact_id in turn.artifact_ids]),
        )

    @staticmethod
    def _turn_from_row(row: tuple) -> ConversationTurn:
        turn_id, thread_id, role, text, created_at, mode, guidance, mood, artifact_ids = row
        return ConversationTurn(
            id=UUID(turn_id),
            thread_id=_uuid_or_none(thread_id),
            role=Role.from_raw(role),
            text=text,
            created_at=datetime.fromisoformat(created_at),
            mode=AssistantMode.from_raw(mode),
            ari_guidance=guidance,
            ari_mood=Mood.from_raw(mood),
            artifact_ids=tuple(UUID(value) for value in json.loads(artifact_ids or "[]")),
        )

    # Artifacts

    async def save_artifact(self, artifact: Artifact) -> None:
        with self._guard("save artifact") as db:
            await db.execute(
                f"""
                INSERT INTO artifacts ({_ARTIFACT_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    kind = excluded.kind,
                    title = excluded.title,
                    content = excluded.content,
                    tags = excluded.tags,
                    updated_at = excluded.updated_at
                """,
                (
                    str(artifact.id),
                    artifact.kind.value,
                    artifact.title,
                    artifact.content,
                    json.dumps(artifact.tags),
                    artifact.created_at.isoformat(),
                    artifact.updated_at.isoformat(),
                    _str_or_none(artifact.source_thread_id),
                    _str_or_none(artifact.source_turn_id),
                ),
            )
            await db.commit()

    async def get_artifact(self, artifact_id: UUID) -> Artifact | None:
        with self._guard("load artifact") as db:
            async with db.execute(
                f"SELECT {_ARTIFACT_COLUMNS} FROM artifacts WHERE id = ?",
                (str(artifact_id),),
            ) as cursor:
                row = await cursor.fetchone()
            return self._artifact_from_row(row) if row else None

    async def list_artifacts(self) -> list[Artifact]:
        with self._guard("list artifacts") as db:
            async with db.execute(
                f"SELECT {_ARTIFACT_COLUMNS} FROM artifacts ORDER BY created_at DESC"
            ) as cursor:
                rows = await cursor.fetchall()
            return [self._artifact_from_row(row) for row in rows]

    @staticmethod
    def _artifact_from_row(row: tuple) -> Artifact:
        (artifact_id, kind, title, content, tags, created_at, updated_at,
         source_thread_id, source_turn_id) = row
        return Artifact(
            id=UUID(artifact_id),
            kind=ArtifactKind.from_raw(kind),
            title=title,
            content=content,
            tags=json.loads(tags or "[]"),
            created_at=datetime.fromisoformat(created_at),
            updated_at=datetime.fromisoformat(updated_at),
            source_thread_id=_uuid_or_none(source_thread_id),
            source_turn_id=_uuid_or_none(source_turn_id),
        )

    # Library

    async def save_library_item(self, item: LibraryItem) -> None:
        with self._guard("save library item") as db:
            await db.execute(
                f"""
                INSERT INTO library_items ({_LIBRARY_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title = excluded.title,
                    kind = excluded.kind,
                    raw_text = excluded.raw_text,
                    ai_summary = excluded.ai_summary,
                    updated_at = excluded.updated_at
                """,
                (
                    str(item.id),
                    item.title,
                    item.kind.value,
                    item.raw_text,
                    item.ai_summary,
                    item.created_at.isoformat(),
                    item.updated_at.isoformat(),
                ),
            )
            await db.commit()

    async def list_library_items(self) -> list[LibraryItem]:
        with self._guard("list library items") as db:
            async with db.execute(
                f"SELECT {_LIBRARY_COLUMNS} FROM library_items ORDER BY created_at DESC"
            ) as cursor:
                rows = await cursor.fetchall()

        items = []
        for item_id, title, kind, raw_text, ai_summary, created_at, updated_at in rows:
            items.append(LibraryItem(
                id=UUID(item_id),
                title=title,
                kind=LibraryItemKind.from_raw(kind),
                raw_text=raw_text,
                ai_summary=ai_summary,
                created_at=datetime.fromisoformat(created_at),
                updated_at=datetime.fromisoformat(updated_at),
            ))
        return items

    # Preferences

    async def get_preferences(self) -> UserPreferences:
        with self._guard("load preferences") as db:
            async with db.execute(
                """
                SELECT id, ari_enabled, ari_expressiveness, ari_vibe, verbosity, output_style
                FROM preferences LIMIT 1
                """
            ) as cursor:
                row = await cursor.fetchone()

        if row is None:
            return UserPreferences()

        prefs_id, ari_enabled, expressiveness, vibe, verbosity, output_style = row
        # unknown raw values fall back through the model's validators
        return UserPreferences(
            id=UUID(prefs_id),
            ari_enabled=bool(ari_enabled),
            ari_expressiveness=expressiveness,
            ari_vibe=vibe,
            verbosity=verbosity,
            output_style=output_style,
        )

    async def save_preferences(self, preferences: UserPreferences) -> None:
        with self._guard("save preferences") as db:
            await db.execute("DELETE FROM preferences")
            await db.execute(
                """
                INSERT INTO preferences
                (id, ari_enabled, ari_expressiveness, ari_vibe, verbosity, output_style)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    str(preferences.id),
                    int(preferences.ari_enabled),
                    preferences.ari_expressiveness.value,
                    preferences.ari_vibe.value,
                    preferences.verbosity.value,
                    preferences.output_style.value,
                ),
            )
            await db.commit()

    @property
    def backend_type(self) -> str:
        return "sqlite"

    @property
    def db_path(self) -> Path:
        return self._db_path
