"""Conversation coordinator.

The facade a front end talks to. It sequences one chat turn::

    user turn -> mood (pre) -> generate -> assistant turn -> title -> mood (post)

and owns artifact saving, transforms, library summaries and coaching actions.

Persistence failures never abort a turn: they are logged and kept in
``persistence_error`` for the front end to show.
"""

from collections.abc import Awaitable
from datetime import datetime
from uuid import UUID

from loguru import logger
from pydantic import BaseModel, ConfigDict

from .artifacts.models import Artifact, ArtifactKind, ArtifactSuggestion, LibraryItem, TransformType
from .config import RETITLE_TURN_THRESHOLD
from .conversation.models import ConversationTurn, Thread, generate_thread_title
from .conversation.modes import AssistantMode, Role
from .conversation.preferences import UserPreferences
from .engine.classifier import classify_intent
from .engine.orchestrator import GenerationOrchestrator
from .engine.state import EngineBusyError, GenerationResult
from .mood.engine import MoodEngine
from .mood.models import CoachingActionKind, MoodUpdate
from .store.base import ConversationStore, PersistenceError

ATTACHMENT_ONLY_MESSAGE = "Analyze the attached file."
SAVED_OUTPUT_TITLE = "Saved Output"

COACHING_PROMPTS = {
    CoachingActionKind.CREATE_CHECKLIST: "Turn that into a checklist",
    CoachingActionKind.ASK_FOLLOW_UP: "Tell me more about that",
    CoachingActionKind.SIMPLIFY: "Simplify that for me",
}


class TurnOutcome(BaseModel):
    """Everything one completed chat turn produced."""

    model_config = ConfigDict(frozen=True)

    user_turn: ConversationTurn
    assistant_turn: ConversationTurn
    result: GenerationResult
    mood: MoodUpdate


class ConversationCoordinator:
    """Coordinates the orchestrator, the mood engine and the store.

    Args:
        orchestrator: Generation orchestrator, one per conversation view
        mood_engine: Ari's mood engine
        store: Persistence backend (must already be connected)
    """

    def __init__(
        self,
        orchestrator: GenerationOrchestrator,
        mood_engine: MoodEngine,
        store: ConversationStore,
    ):
        self._orchestrator = orchestrator
        self._mood_engine = mood_engine
        self._store = store
        self._active_thread: Thread | None = None
        self._mood = MoodUpdate.silent()
        self._last_assistant_turn: ConversationTurn | None = None
        self._preferences = UserPreferences()
        self._persistence_error: str | None = None

    @property
    def orchestrator(self) -> GenerationOrchestrator:
        return self._orchestrator

    @property
    def store(self) -> ConversationStore:
        return self._store

    @property
    def active_thread(self) -> Thread | None:
        return self._active_thread

    @property
    def mood(self) -> MoodUpdate:
        """Ari's latest mood, guidance line and coaching actions."""
        return self._mood

    @property
    def last_assistant_turn(self) -> ConversationTurn | None:
        return self._last_assistant_turn

    @property
    def persistence_error(self) -> str | None:
        """Message describing the most recent persistence failure, if any."""
        return self._persistence_error

    def clear_persistence_error(self) -> None:
        self._persistence_error = None

    async def _persist(self, operation: str, call: Awaitable[None]) -> bool:
        try:
            await call
        except PersistenceError as e:
            message = f"Couldn't {operation}: {e}"
            logger.error(message)
            self._persistence_error = message
            return False
        return True

    async def _load_turns(self, thread_id: UUID) -> list[ConversationTurn]:
        try:
            return await self._store.get_turns(thread_id)
        except PersistenceError as e:
            message = f"Couldn't load messages: {e}"
            logger.error(message)
            self._persistence_error = message
            return []

    # Threads

    async def create_thread(self) -> Thread:
        """Create a thread and make it active."""
        thread = Thread()
        await self._persist("save thread", self._store.save_thread(thread))
        self._active_thread = thread
        logger.info(f"Created thread {thread.id}")
        return thread

    async def open_thread(self, thread: Thread) -> None:
        """Make an existing thread active."""
        self._active_thread = thread
        self._last_assistant_turn = None
        for turn in reversed(await self._load_turns(thread.id)):
            if turn.role == Role.ASSISTANT:
                self._last_assistant_turn = turn
                break

    async def delete_thread(self, thread_id: UUID) -> None:
        if self._active_thread is not None and self._active_thread.id == thread_id:
            self._active_thread = None
            self._last_assistant_turn = None
        await self._persist("delete thread", self._store.delete_thread(thread_id))

    # Chat

    async def send_message(
        self,
        thread: Thread | None,
        text: str,
        preferences: UserPreferences,
        attachment_context: str | None = None,
        selected_mode: AssistantMode = AssistantMode.GENERAL,
    ) -> TurnOutcome | None:
        """Run one chat turn.

        Args:
            thread: Thread to post to; a new thread is created when None
            text: User message. May be blank when an attachment is given
            preferences: User preferences
            attachment_context: Extracted attachment text, if any
            selected_mode: Mode picked by the user; ``GENERAL`` means classify

        Returns:
            TurnOutcome, or None if the generation was cancelled (no assistant
            turn is recorded then)

        Raises:
            ValueError: If both the message and the attachment are empty
            EngineBusyError: If a generation is already running
        """
        typed = text.strip()
        if not typed and attachment_context is None:
            raise ValueError("Cannot send an empty message")
        if self._orchestrator.is_generating:
            raise EngineBusyError("A generation is already in progress")

        if thread is None:
            thread = self._active_thread or await self.create_thread()
        self._active_thread = thread
        self._preferences = preferences

        user_text = typed or ATTACHMENT_ONLY_MESSAGE
        mode = classify_intent(user_text) if selected_mode == AssistantMode.GENERAL else selected_mode

        prior_turns = await self._load_turns(thread.id)
        user_turn = ConversationTurn(thread_id=thread.id, role=Role.USER, text=user_text, mode=mode)
        await self._persist("save message", self._store.add_turn(user_turn))
        thread.touch()
        history = [*prior_turns, user_turn]

        self._mood = self._mood_engine.update(history, mode, preferences)

        result = await self._orchestrator.generate(
            user_text,
            mode,
            history,
            preferences,
            attachment_context=attachment_context,
        )
        if result is None:
            logger.info(f"Turn cancelled in thread {thread.id}")
            await self._persist("save thread", self._store.save_thread(thread))
            return None

        guidance = self._mood.guidance if preferences.ari_enabled else None
        result = result.model_copy(update={"ari_guidance": guidance, "ari_mood": self._mood.mood})
        assistant_turn = ConversationTurn(
            thread_id=thread.id,
            role=Role.ASSISTANT,
            text=result.text,
            mode=result.mode,
            ari_guidance=guidance,
            ari_mood=self._mood.mood,
        )
        await self._persist("save message", self._store.add_turn(assistant_turn))
        self._last_assistant_turn = assistant_turn
        history.append(assistant_turn)

        if len(history) <= RETITLE_TURN_THRESHOLD:
            thread.title = generate_thread_title(user_text)
        thread.touch()
        await self._persist("save thread", self._store.save_thread(thread))

        self._mood = self._mood_engine.update(history, mode, preferences)
        return TurnOutcome(
            user_turn=user_turn,
            assistant_turn=assistant_turn,
            result=result,
            mood=self._mood,
        )

    def cancel(self) -> None:
        """Cancel the in-flight generation, if any."""
        self._orchestrator.cancel()

    # Artifacts

    async def save_artifact(
        self,
        suggestion: ArtifactSuggestion,
        thread_id: UUID | None = None,
        turn: ConversationTurn | None = None,
        preferences: UserPreferences | None = None,
    ) -> Artifact:
        """Persist a suggestion as an artifact and link it to its turn.

        Args:
            suggestion: Accepted artifact suggestion
            thread_id: Source thread; defaults to the turn's thread, then the
                active thread
            turn: Source turn that gets the artifact id appended
            preferences: Preferences for Ari's celebration; defaults to the
                ones used by the last message

        Returns:
            The saved artifact
        """
        if thread_id is None:
            thread_id = turn.thread_id if turn is not None else None
        if thread_id is None and self._active_thread is not None:
            thread_id = self._active_thread.id

        artifact = Artifact.from_suggestion(
            suggestion,
            source_thread_id=thread_id,
            source_turn_id=turn.id if turn is not None else None,
        )
        await self._persist("save output", self._store.save_artifact(artifact))

        if turn is not None:
            linked = turn.with_artifact(artifact.id)
            await self._persist("update message", self._store.update_turn(linked))
            if self._last_assistant_turn is not None and self._last_assistant_turn.id == turn.id:
                self._last_assistant_turn = linked

        history = await self._load_turns(thread_id) if thread_id is not None else []
        last_mode = next((t.mode for t in reversed(history) if t.role == Role.USER), None)
        self._mood = self._mood_engine.update(
            history,
            last_mode,
            preferences or self._preferences,
            just_saved_artifact=True,
        )
        logger.info(f"Saved {artifact.kind.value} artifact {artifact.id}")
        return artifact

    async def transform_artifact(
        self,
        artifact: Artifact,
        transform_type: TransformType,
        preferences: UserPreferences,
    ) -> Artifact:
        """Apply a transform and save the result as a new artifact."""
        transformed = await self._orchestrator.transform(artifact.content, transform_type, preferences)
        new_artifact = Artifact(
            kind=transform_type.result_kind(artifact.kind),
            title=f"{artifact.title} ({transform_type.value})",
            content=transformed,
            tags=[*artifact.tags, transform_type.value.lower()],
            source_thread_id=artifact.source_thread_id,
            source_turn_id=artifact.source_turn_id,
        )
        await self._persist("save output", self._store.save_artifact(new_artifact))
        return new_artifact

    async def summarize_library_item(self, item: LibraryItem) -> LibraryItem:
        """Attach an AI summary to a library item."""
        summary = await self._orchestrator.summarize_text(item.raw_text)
        updated = item.model_copy(update={"ai_summary": summary, "updated_at": datetime.now()})
        await self._persist("save library item", self._store.save_library_item(updated))
        return updated

    # Coaching

    async def handle_coaching_action(
        self,
        kind: CoachingActionKind,
        thread: Thread | None,
        preferences: UserPreferences,
    ) -> TurnOutcome | Artifact | None:
        """Perform the coaching action Ari suggested.

        Returns:
            The new turn for message actions, the saved artifact for
            ``saveArtifact``, or None when there is nothing to do here
            (``refineTone`` is handled by the front end's transform view)
        """
        prompt = COACHING_PROMPTS.get(kind)
        if prompt is not None:
            return await self.send_message(thread, prompt, preferences)

        if kind == CoachingActionKind.SAVE_ARTIFACT:
            turn = self._last_assistant_turn
            if turn is None:
                return None
            suggestion = ArtifactSuggestion(kind=ArtifactKind.OTHER, title=SAVED_OUTPUT_TITLE, content=turn.text)
            return await self.save_artifact(suggestion, turn=turn, preferences=preferences)

        return None
