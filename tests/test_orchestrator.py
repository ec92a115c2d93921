"""Unit tests for the generation orchestrator."""
import asyncio
from typing import Any

import pytest

from ariassist.artifacts import ArtifactKind, TransformType
from ariassist.conversation import AssistantMode, UserPreferences, Verbosity
from ariassist.engine import (
    EngineBusyError,
    EngineSnapshot,
    EngineStatus,
    GenerationOrchestrator,
)
from ariassist.llm import GenerationProvider, ProviderResponse, SnapshotStream, StubProvider
from ariassist.prompts import load_prompt, render_prompt


class BlockingProvider(GenerationProvider):
    """Provider that waits for ``release`` before answering."""

    def __init__(self):
        self.release = asyncio.Event()

    @property
    def model(self) -> str:
        return "blocking"

    async def respond(self, prompt: str, instructions: str | None = None, **kwargs: Any) -> ProviderResponse:
        await self.release.wait()
        return ProviderResponse(content="done", model=self.model)

    async def stream_response(self, prompt: str, instructions: str | None = None, **kwargs: Any) -> SnapshotStream:
        return SnapshotStream(self._deltas())

    async def _deltas(self):
        await self.release.wait()
        yield "late text"

    async def close(self) -> None:
        pass


class Recorder:
    """State listener that keeps every snapshot."""

    def __init__(self):
        self.snapshots: list[EngineSnapshot] = []

    def __call__(self, snapshot: EngineSnapshot) -> None:
        self.snapshots.append(snapshot)

    @property
    def statuses(self) -> list[EngineStatus]:
        return [s.state.status for s in self.snapshots]


async def _wait_for(condition, attempts: int = 200, interval: float = 0.0) -> None:
    for _ in range(attempts):
        if condition():
            return
        await asyncio.sleep(interval)
    raise AssertionError("condition not reached")


class TestGenerate:
    """Tests for GenerationOrchestrator.generate."""

    @pytest.mark.asyncio
    async def test_state_sequence(self, stub_provider, preferences):
        """Test a generation walks routing, generating, streaming, complete, idle."""
        recorder = Recorder()
        orchestrator = GenerationOrchestrator(stub_provider, on_state_change=recorder)

        result = await orchestrator.generate("hello", AssistantMode.GENERAL, [], preferences)

        assert result.text == "Here is a helpful answer."
        statuses = recorder.statuses
        assert statuses[:2] == [EngineStatus.ROUTING, EngineStatus.GENERATING]
        assert statuses[-2:] == [EngineStatus.COMPLETE, EngineStatus.IDLE]
        assert set(statuses[2:-2]) == {EngineStatus.STREAMING}
        assert orchestrator.state.status == EngineStatus.IDLE
        assert orchestrator.streaming_text == ""
        assert not orchestrator.is_generating

    @pytest.mark.asyncio
    async def test_snapshots_replace_streamed_text(self, stub_provider, preferences):
        """Test each delivery carries the full text so far."""
        recorder = Recorder()
        orchestrator = GenerationOrchestrator(stub_provider, on_state_change=recorder)

        result = await orchestrator.generate("hello", AssistantMode.GENERAL, [], preferences)

        streamed = [s.streaming_text for s in recorder.snapshots if s.state.status == EngineStatus.STREAMING]
        assert len(streamed) == 5
        assert all(later.startswith(earlier) for earlier, later in zip(streamed, streamed[1:]))
        assert streamed[-1] == result.text
        partials = [s.state.partial_text for s in recorder.snapshots if s.state.status == EngineStatus.STREAMING]
        assert partials == streamed

    @pytest.mark.asyncio
    async def test_system_prompt(self, stub_provider, preferences):
        """Test identity, verbosity and mode instructions."""
        orchestrator = GenerationOrchestrator(stub_provider)

        await orchestrator.generate("hello", AssistantMode.GENERAL, [], preferences)

        _, instructions = stub_provider.calls[0]
        assert instructions == (
            "You are Ari, a warm and supportive assistant. "
            "Provide balanced responses with enough detail to be helpful. "
            "Help with whatever the user needs. Be clear and supportive."
        )

    @pytest.mark.asyncio
    async def test_system_prompt_without_ari(self):
        """Test the plain identity when Ari is switched off."""
        provider = StubProvider()
        orchestrator = GenerationOrchestrator(provider)
        prefs = UserPreferences(ari_enabled=False, verbosity=Verbosity.CONCISE)

        await orchestrator.generate("hello", AssistantMode.PLAN, [], prefs)

        _, instructions = provider.calls[0]
        assert instructions == (
            "You are a warm and supportive assistant. "
            "Keep responses concise and to the point. "
            "Create structured plans with clear phases and actionable tasks."
        )

    @pytest.mark.asyncio
    async def test_context_is_last_ten_turns(self, stub_provider, preferences, make_history):
        """Test only the ten most recent turns are sent, oldest first."""
        orchestrator = GenerationOrchestrator(stub_provider)

        await orchestrator.generate("what now", AssistantMode.GENERAL, make_history(12), preferences)

        prompt, _ = stub_provider.calls[0]
        parts = prompt.split("\n\n")
        assert len(parts) == 11
        assert parts[0] == "User: message 2"
        assert parts[1] == "Assistant: message 3"
        assert parts[9] == "Assistant: message 11"
        assert parts[10] == "User: what now"

    @pytest.mark.asyncio
    async def test_attachment_block(self, stub_provider, preferences):
        """Test attachment context precedes the user input."""
        orchestrator = GenerationOrchestrator(stub_provider)

        await orchestrator.generate(
            "summarize", AssistantMode.SUMMARIZE, [], preferences, attachment_context="notes here"
        )

        prompt, _ = stub_provider.calls[0]
        assert prompt == "Attached file content:\nnotes here\n\nUser: summarize"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("mode,kind,title,tags", [
        (AssistantMode.WRITE, ArtifactKind.DRAFT, "Draft", ("draft", "writing")),
        (AssistantMode.SUMMARIZE, ArtifactKind.SUMMARY, "Summary", ("summary",)),
        (AssistantMode.PLAN, ArtifactKind.PLAN, "Plan", ("plan", "tasks")),
    ])
    async def test_artifact_suggestion(self, preferences, mode, kind, title, tags):
        """Test write, summarize and plan propose an artifact."""
        orchestrator = GenerationOrchestrator(StubProvider(responses=["body"]))

        result = await orchestrator.generate("go", mode, [], preferences)

        suggestion = result.suggested_artifact
        assert suggestion.kind == kind
        assert suggestion.title == title
        assert suggestion.tags == tags
        assert suggestion.content == "body"
        assert result.mode == mode

    @pytest.mark.asyncio
    @pytest.mark.parametrize("mode", [AssistantMode.EXPLAIN, AssistantMode.BRAINSTORM, AssistantMode.GENERAL])
    async def test_no_suggestion_for_other_modes(self, preferences, mode):
        """Test explain, brainstorm and general propose nothing."""
        orchestrator = GenerationOrchestrator(StubProvider())

        result = await orchestrator.generate("go", mode, [], preferences)

        assert result.suggested_artifact is None

    @pytest.mark.asyncio
    async def test_ari_fields_left_empty(self, stub_provider, preferences):
        """Test guidance and mood are filled by the caller, not here."""
        result = await GenerationOrchestrator(stub_provider).generate("hi", AssistantMode.GENERAL, [], preferences)

        assert result.ari_guidance is None
        assert result.ari_mood is None

    @pytest.mark.asyncio
    async def test_provider_failure_becomes_text(self, preferences):
        """Test a failing provider produces a readable result."""
        recorder = Recorder()
        provider = StubProvider(error=RuntimeError("network down"))
        orchestrator = GenerationOrchestrator(provider, on_state_change=recorder)

        result = await orchestrator.generate("draft an email", AssistantMode.WRITE, [], preferences)

        assert result.text == "Generation failed: network down"
        assert result.failed
        assert result.suggested_artifact is None
        assert recorder.statuses[-2:] == [EngineStatus.ERROR, EngineStatus.IDLE]
        assert recorder.snapshots[-2].state.message == "Generation failed: network down"
        assert orchestrator.state.status == EngineStatus.IDLE

    @pytest.mark.asyncio
    async def test_failure_without_message_names_the_error(self, preferences):
        """Test errors with empty messages still read well."""
        orchestrator = GenerationOrchestrator(StubProvider(error=TimeoutError()))

        result = await orchestrator.generate("hi", AssistantMode.GENERAL, [], preferences)

        assert result.text == "Generation failed: TimeoutError"

    @pytest.mark.asyncio
    async def test_overlapping_generate_is_rejected(self, preferences):
        """Test a second generation while one is active raises."""
        provider = BlockingProvider()
        orchestrator = GenerationOrchestrator(provider)
        task = asyncio.create_task(orchestrator.generate("one", AssistantMode.GENERAL, [], preferences))
        await _wait_for(lambda: orchestrator.is_generating)

        with pytest.raises(EngineBusyError):
            await orchestrator.generate("two", AssistantMode.GENERAL, [], preferences)

        provider.release.set()
        result = await task
        assert result.text == "late text"


class TestCancel:
    """Tests for GenerationOrchestrator.cancel."""

    @pytest.mark.asyncio
    async def test_cancel_before_delivery(self, preferences):
        """Test cancelling before any text arrives returns no result."""
        recorder = Recorder()
        orchestrator = GenerationOrchestrator(BlockingProvider(), on_state_change=recorder)
        task = asyncio.create_task(orchestrator.generate("hi", AssistantMode.WRITE, [], preferences))
        await _wait_for(lambda: orchestrator.state.status == EngineStatus.GENERATING)

        orchestrator.cancel()
        result = await task

        assert result is None
        assert orchestrator.was_cancelled
        assert orchestrator.state.status == EngineStatus.IDLE
        assert orchestrator.streaming_text == ""
        assert EngineStatus.STREAMING not in recorder.statuses
        assert EngineStatus.COMPLETE not in recorder.statuses

    @pytest.mark.asyncio
    async def test_cancel_mid_stream_discards_text(self, preferences):
        """Test cancelling during streaming drops the partial text."""
        provider = StubProvider(responses=["a fairly long streamed answer"], chunk_size=1, delay=0.01)
        orchestrator = GenerationOrchestrator(provider)
        task = asyncio.create_task(orchestrator.generate("hi", AssistantMode.GENERAL, [], preferences))
        await _wait_for(lambda: orchestrator.streaming_text != "", interval=0.005)

        orchestrator.cancel()

        assert orchestrator.streaming_text == ""
        assert not orchestrator.is_generating
        assert await task is None
        assert orchestrator.streaming_text == ""

    @pytest.mark.asyncio
    async def test_resend_right_after_cancel(self, preferences):
        """Test a cancelled call finishing late leaves the next generation alone."""
        provider = StubProvider(responses=["first reply", "second reply"], chunk_size=1, delay=0.01)
        orchestrator = GenerationOrchestrator(provider)
        first = asyncio.create_task(orchestrator.generate("one", AssistantMode.GENERAL, [], preferences))
        await _wait_for(lambda: orchestrator.streaming_text != "", interval=0.005)

        orchestrator.cancel()
        second = asyncio.create_task(orchestrator.generate("two", AssistantMode.GENERAL, [], preferences))

        assert await first is None
        result = await second
        assert result.text == "second reply"
        assert not orchestrator.was_cancelled
        assert orchestrator.state.status == EngineStatus.IDLE

    @pytest.mark.asyncio
    async def test_cancel_reaches_generation_started_after_cancel(self, preferences):
        """Test the newer stream can still be interrupted once the old call returns."""
        orchestrator = GenerationOrchestrator(BlockingProvider())
        first = asyncio.create_task(orchestrator.generate("one", AssistantMode.GENERAL, [], preferences))
        await _wait_for(lambda: orchestrator.is_generating)
        orchestrator.cancel()
        second = asyncio.create_task(orchestrator.generate("two", AssistantMode.GENERAL, [], preferences))
        assert await first is None
        assert orchestrator.is_generating

        orchestrator.cancel()

        assert await asyncio.wait_for(second, timeout=1) is None
        assert orchestrator.was_cancelled
        assert orchestrator.state.status == EngineStatus.IDLE

    @pytest.mark.asyncio
    async def test_cancel_when_idle_is_a_no_op(self):
        """Test cancel without a generation changes nothing."""
        recorder = Recorder()
        orchestrator = GenerationOrchestrator(StubProvider(), on_state_change=recorder)

        orchestrator.cancel()

        assert recorder.snapshots == []
        assert not orchestrator.was_cancelled
        assert orchestrator.state.status == EngineStatus.IDLE

    @pytest.mark.asyncio
    async def test_next_generation_clears_cancelled_flag(self, preferences):
        """Test was_cancelled only describes the latest generation."""
        orchestrator = GenerationOrchestrator(BlockingProvider())
        task = asyncio.create_task(orchestrator.generate("hi", AssistantMode.GENERAL, [], preferences))
        await _wait_for(lambda: orchestrator.is_generating)
        orchestrator.cancel()
        await task

        orchestrator._provider = StubProvider(responses=["again"])
        result = await orchestrator.generate("hi", AssistantMode.GENERAL, [], preferences)

        assert result.text == "again"
        assert not orchestrator.was_cancelled


class TestTransform:
    """Tests for transform and summarize_text."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("transform_type", list(TransformType))
    async def test_uses_template_and_instructions(self, preferences, transform_type):
        """Test every transform sends its template with the shared instructions."""
        provider = StubProvider(responses=["rewritten"])
        orchestrator = GenerationOrchestrator(provider)

        result = await orchestrator.transform("Some long content.", transform_type, preferences)

        assert result == "rewritten"
        prompt, instructions = provider.calls[0]
        assert prompt == render_prompt(transform_type.prompt_name, "Some long content.")
        assert "Some long content." in prompt
        assert instructions == load_prompt("transform_system")

    @pytest.mark.asyncio
    async def test_transform_flag_only(self, preferences):
        """Test transforms toggle the transforming flag, not the chat state."""
        recorder = Recorder()
        orchestrator = GenerationOrchestrator(StubProvider(), on_state_change=recorder)

        await orchestrator.transform("text", TransformType.SHORTER, preferences)

        assert [s.is_transforming for s in recorder.snapshots] == [True, False]
        assert set(recorder.statuses) == {EngineStatus.IDLE}

    @pytest.mark.asyncio
    async def test_transform_failure_becomes_text(self, preferences):
        """Test a failing provider yields a readable transform result."""
        orchestrator = GenerationOrchestrator(StubProvider(error=RuntimeError("quota")))

        result = await orchestrator.transform("text", TransformType.QUIZ, preferences)

        assert result == "Transform failed: quota"
        assert not orchestrator.is_transforming

    @pytest.mark.asyncio
    async def test_broken_template_override_becomes_text(self, preferences, tmp_path, monkeypatch):
        """Test a local template with stray braces fails like a provider error."""
        (tmp_path / "prompts").mkdir()
        (tmp_path / "prompts" / "transform_shorter.txt").write_text("Shorten {content} {oops}", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        provider = StubProvider()
        orchestrator = GenerationOrchestrator(provider)

        result = await orchestrator.transform("text", TransformType.SHORTER, preferences)

        assert result == "Transform failed: 'oops'"
        assert provider.calls == []
        assert not orchestrator.is_transforming

    @pytest.mark.asyncio
    async def test_overlapping_transform_is_rejected(self, preferences):
        """Test two transforms cannot run at once, but chat can."""
        provider = BlockingProvider()
        orchestrator = GenerationOrchestrator(provider)
        task = asyncio.create_task(orchestrator.transform("text", TransformType.BULLETS, preferences))
        await _wait_for(lambda: orchestrator.is_transforming)

        with pytest.raises(EngineBusyError):
            await orchestrator.transform("more", TransformType.BULLETS, preferences)
        assert not orchestrator.is_generating

        provider.release.set()
        assert await task == "done"

    @pytest.mark.asyncio
    async def test_summarize_text(self):
        """Test library summaries use the summary template."""
        provider = StubProvider(responses=["In short."])
        orchestrator = GenerationOrchestrator(provider)

        summary = await orchestrator.summarize_text("A long article.")

        assert summary == "In short."
        prompt, instructions = provider.calls[0]
        assert prompt.startswith("Summarize the following text in 2-3 concise sentences:")
        assert prompt.endswith("A long article.")
        assert instructions is None

    @pytest.mark.asyncio
    async def test_summarize_failure(self):
        """Test a failing summary yields a readable result."""
        orchestrator = GenerationOrchestrator(StubProvider(error=RuntimeError("offline")))

        assert await orchestrator.summarize_text("text") == "Summary failed: offline"
