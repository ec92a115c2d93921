"""Generation orchestrator.

Owns the state machine for one in-flight chat generation, the separate
transform flag, and cooperative cancellation.

Hidden design decisions:
- Prompt layout (system instructions, recent context, attachment, user input)
- Consuming the provider stream in a child task so ``cancel`` can interrupt
  a provider that is waiting between snapshots
- Mode to artifact routing

Provider failures never escape this class: they come back as readable text so
the conversation keeps flowing.

The orchestrator is single-tenant: one event loop owns it and every mutation
goes through its methods, so it takes no locks.
"""

import asyncio
from collections.abc import Callable, Sequence

from loguru import logger

from ..artifacts.models import ArtifactKind, ArtifactSuggestion, TransformType
from ..conversation.models import ConversationTurn
from ..conversation.modes import AssistantMode
from ..conversation.preferences import UserPreferences
from ..llm.base import GenerationProvider
from ..prompts import get_transform_instructions, render_prompt
from .prompt_builder import build_conversation_context, build_prompt, build_system_prompt
from .state import (
    CancellationToken,
    EngineBusyError,
    EngineSnapshot,
    EngineState,
    GenerationResult,
)

StateListener = Callable[[EngineSnapshot], None]

# kind, title, tags
ARTIFACT_ROUTES: dict[AssistantMode, tuple[ArtifactKind, str, tuple[str, ...]]] = {
    AssistantMode.WRITE: (ArtifactKind.DRAFT, "Draft", ("draft", "writing")),
    AssistantMode.SUMMARIZE: (ArtifactKind.SUMMARY, "Summary", ("summary",)),
    AssistantMode.PLAN: (ArtifactKind.PLAN, "Plan", ("plan", "tasks")),
}


def suggest_artifact(text: str, mode: AssistantMode) -> ArtifactSuggestion | None:
    """Propose an artifact for a finished response, if the mode warrants one."""
    route = ARTIFACT_ROUTES.get(mode)
    if route is None:
        return None
    kind, title, tags = route
    return ArtifactSuggestion(kind=kind, title=title, content=text, tags=tags)


def _describe(error: Exception) -> str:
    return str(error) or type(error).__name__


class GenerationOrchestrator:
    """Drives generation calls against a provider.

    Args:
        provider: Generation backend
        on_state_change: Optional listener called with a fresh snapshot after
            every state, streamed-text or transform-flag change
    """

    def __init__(
        self,
        provider: GenerationProvider,
        on_state_change: StateListener | None = None,
    ):
        self._provider = provider
        self._on_state_change = on_state_change
        self._state = EngineState.idle()
        self._streaming_text = ""
        self._is_transforming = False
        self._was_cancelled = False
        self._token: CancellationToken | None = None
        self._stream_task: asyncio.Task | None = None

    @property
    def provider(self) -> GenerationProvider:
        return self._provider

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def streaming_text(self) -> str:
        return self._streaming_text

    @property
    def is_generating(self) -> bool:
        return self._state.is_active

    @property
    def is_transforming(self) -> bool:
        return self._is_transforming

    @property
    def was_cancelled(self) -> bool:
        """True if the most recent generation was cancelled."""
        return self._was_cancelled

    def snapshot(self) -> EngineSnapshot:
        return EngineSnapshot(
            state=self._state,
            streaming_text=self._streaming_text,
            is_transforming=self._is_transforming,
        )

    def _notify(self) -> None:
        if self._on_state_change is not None:
            self._on_state_change(self.snapshot())

    def _set_state(self, state: EngineState, streaming_text: str | None = None) -> None:
        self._state = state
        if streaming_text is not None:
            self._streaming_text = streaming_text
        self._notify()

    def _finish(self, token: CancellationToken) -> None:
        """Return to idle unless ``cancel`` already released this generation."""
        if self._token is token:
            self._token = None
            self._set_state(EngineState.idle(), streaming_text="")

    async def generate(
        self,
        user_input: str,
        mode: AssistantMode,
        history: Sequence[ConversationTurn],
        preferences: UserPreferences,
        attachment_context: str | None = None,
    ) -> GenerationResult | None:
        """Generate a streamed response for one user turn.

        Args:
            user_input: The user's message
            mode: Mode assigned to the user turn
            history: Thread turns, oldest first
            preferences: User preferences (Ari identity, verbosity)
            attachment_context: Optional extracted attachment text

        Returns:
            GenerationResult, or None if the generation was cancelled. Provider
            failures produce a result whose text describes the failure.

        Raises:
            EngineBusyError: If another generation is already in flight
        """
        if self._state.is_active:
            raise EngineBusyError("A generation is already in progress")

        token = CancellationToken()
        self._token = token
        self._was_cancelled = False
        self._set_state(EngineState.routing(), streaming_text="")

        system_prompt = build_system_prompt(mode, preferences)
        prompt = build_prompt(user_input, build_conversation_context(history), attachment_context)

        self._set_state(EngineState.generating())
        logger.info(f"Generating response mode={mode.value} history={len(history)} prompt_chars={len(prompt)}")

        task = asyncio.create_task(self._consume_stream(prompt, system_prompt, token))
        self._stream_task = task
        try:
            text = await task
        except asyncio.CancelledError:
            if not token.cancelled:
                self._finish(token)
                raise
            text = None
        except Exception as e:
            message = f"Generation failed: {_describe(e)}"
            logger.opt(exception=e).warning(message)
            if self._token is token:
                self._set_state(EngineState.error(message))
            self._finish(token)
            return GenerationResult(text=message, mode=mode, failed=True)
        finally:
            if self._stream_task is task:
                self._stream_task = None

        # cancel() already flagged was_cancelled; a newer generation may own it now
        if token.cancelled or text is None:
            logger.info("Generation cancelled")
            self._finish(token)
            return None

        self._set_state(EngineState.complete())
        result = GenerationResult(
            text=text,
            mode=mode,
            suggested_artifact=suggest_artifact(text, mode),
        )
        logger.info(f"Generation complete chars={len(text)} artifact={result.suggested_artifact is not None}")
        self._finish(token)
        return result

    async def _consume_stream(
        self,
        prompt: str,
        instructions: str,
        token: CancellationToken,
    ) -> str:
        """Read cumulative snapshots until the stream ends or is cancelled."""
        stream = await self._provider.stream_response(prompt, instructions=instructions)
        text = ""
        try:
            async for snapshot in stream:
                if token.cancelled:
                    break
                text = snapshot
                self._set_state(EngineState.streaming(snapshot), streaming_text=snapshot)
        finally:
            await stream.aclose()
        return text

    def cancel(self) -> None:
        """Abort the in-flight generation and return to idle.

        Streamed text is discarded. Safe to call when nothing is running.
        """
        token = self._token
        if token is None:
            return

        token.cancel()
        if self._stream_task is not None and not self._stream_task.done():
            self._stream_task.cancel()
        self._token = None
        self._was_cancelled = True
        self._set_state(EngineState.idle(), streaming_text="")
        logger.debug("Cancellation requested")

    async def transform(
        self,
        content: str,
        transform_type: TransformType,
        preferences: UserPreferences,
    ) -> str:
        """Rewrite content with a single-shot call.

        Runs under the transforming flag only, so chat indicators are not
        affected. Failures come back as text starting with "Transform failed:".

        Raises:
            EngineBusyError: If another transform is already running
        """
        return await self._respond_single_shot(
            transform_type.prompt_name, content, "Transform failed", get_transform_instructions
        )

    async def summarize_text(self, text: str) -> str:
        """Summarize library material in a few sentences."""
        return await self._respond_single_shot("summarize_library", text, "Summary failed")

    async def _respond_single_shot(
        self,
        prompt_name: str,
        content: str,
        failure_label: str,
        load_instructions: Callable[[], str] | None = None,
    ) -> str:
        """Render a template and send it as one request.

        Template errors come back as failure text, like provider errors.
        """
        if self._is_transforming:
            raise EngineBusyError("A transform is already in progress")

        self._is_transforming = True
        self._notify()
        try:
            prompt = render_prompt(prompt_name, content)
            instructions = load_instructions() if load_instructions is not None else None
            response = await self._provider.respond(prompt, instructions=instructions)
            return response.content
        except Exception as e:
            message = f"{failure_label}: {_describe(e)}"
            logger.opt(exception=e).warning(message)
            return message
        finally:
            self._is_transforming = False
            self._notify()
