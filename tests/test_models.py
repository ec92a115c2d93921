"""Unit tests for conversation and artifact models."""
from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from pydantic import ValidationError

from ariassist.artifacts import (
    Artifact,
    ArtifactKind,
    ArtifactSuggestion,
    LibraryItemKind,
    TransformType,
)
from ariassist.conversation import (
    AriExpressiveness,
    AriVibe,
    AssistantMode,
    ConversationTurn,
    OutputStyle,
    Role,
    Thread,
    UserPreferences,
    Verbosity,
    generate_thread_title,
    last_message_preview,
    sort_turns,
)


class TestRawValueFallbacks:
    """Tests for decoding stored enum values."""

    def test_role(self):
        """Test unknown roles decode to user."""
        assert Role.from_raw("assistant") == Role.ASSISTANT
        assert Role.from_raw("narrator") == Role.USER
        assert Role.from_raw(None) == Role.USER

    def test_mode(self):
        """Test unknown modes decode to no mode."""
        assert AssistantMode.from_raw("Plan") == AssistantMode.PLAN
        assert AssistantMode.from_raw("plan") is None
        assert AssistantMode.from_raw(None) is None

    def test_artifact_kind(self):
        """Test unknown artifact kinds decode to other."""
        assert ArtifactKind.from_raw("Quiz") == ArtifactKind.QUIZ
        assert ArtifactKind.from_raw("Poem") == ArtifactKind.OTHER
        assert ArtifactKind.from_raw(None) == ArtifactKind.OTHER

    def test_library_kind(self):
        """Test unknown library kinds decode to note."""
        assert LibraryItemKind.from_raw("Snippet") == LibraryItemKind.SNIPPET
        assert LibraryItemKind.from_raw("Video") == LibraryItemKind.NOTE

    def test_preferences(self):
        """Test unknown preference values decode to their defaults."""
        prefs = UserPreferences(
            ari_expressiveness="Loud",
            ari_vibe=None,
            verbosity="Chatty",
            output_style=3,
        )

        assert prefs.ari_expressiveness == AriExpressiveness.MEDIUM
        assert prefs.ari_vibe == AriVibe.NEUTRAL
        assert prefs.verbosity == Verbosity.BALANCED
        assert prefs.output_style == OutputStyle.STRUCTURED

    def test_preferences_accept_raw_values(self):
        """Test known raw strings decode to their members."""
        prefs = UserPreferences(ari_expressiveness="High", ari_vibe="Calm", verbosity="Concise")

        assert prefs.ari_expressiveness == AriExpressiveness.HIGH
        assert prefs.ari_vibe == AriVibe.CALM
        assert prefs.verbosity == Verbosity.CONCISE


class TestConversationTurn:
    """Tests for ConversationTurn."""

    def test_turns_are_immutable(self):
        """Test turns cannot be edited in place."""
        turn = ConversationTurn(text="hi")

        with pytest.raises(ValidationError):
            turn.text = "changed"

    def test_with_artifact_returns_new_value(self):
        """Test linking an artifact leaves the original untouched."""
        turn = ConversationTurn(text="hi")
        artifact_id = uuid4()

        linked = turn.with_artifact(artifact_id)

        assert linked.artifact_ids == (artifact_id,)
        assert turn.artifact_ids == ()
        assert linked.id == turn.id

    def test_sort_and_preview(self):
        """Test ordering by creation time and the last-message preview."""
        now = datetime(2024, 5, 1, 12, 0)
        late = ConversationTurn(text="second", created_at=now + timedelta(seconds=5))
        early = ConversationTurn(text="first", created_at=now)

        assert sort_turns([late, early]) == [early, late]
        assert last_message_preview([late, early]) == "second"
        assert last_message_preview([]) == "No messages yet"


class TestThreadTitle:
    """Tests for generate_thread_title."""

    def test_short_text_is_kept(self):
        """Test text up to 40 characters is used verbatim."""
        assert generate_thread_title("  Plan my week  ") == "Plan my week"
        assert generate_thread_title("x" * 40) == "x" * 40

    def test_long_text_drops_the_cut_word(self):
        """Test long text is cut at 60 characters minus the last word."""
        text = "Help me write a cover letter for a junior data analyst position at a bank"
        # first 60 chars end inside "position"
        assert generate_thread_title(text) == "Help me write a cover letter for a junior data analyst…"

    def test_thread_defaults(self):
        """Test a new thread is titled New Chat and unpinned."""
        thread = Thread()

        assert thread.title == "New Chat"
        assert not thread.pinned


class TestTransformType:
    """Tests for TransformType."""

    @pytest.mark.parametrize("transform_type,source,expected", [
        (TransformType.SHORTER, ArtifactKind.DRAFT, ArtifactKind.DRAFT),
        (TransformType.MORE_FORMAL, ArtifactKind.SUMMARY, ArtifactKind.SUMMARY),
        (TransformType.BULLETS, ArtifactKind.DRAFT, ArtifactKind.CHECKLIST),
        (TransformType.QUIZ, ArtifactKind.PLAN, ArtifactKind.QUIZ),
        (TransformType.FLASHCARDS, ArtifactKind.OTHER, ArtifactKind.FLASHCARDS),
    ])
    def test_result_kind(self, transform_type, source, expected):
        """Test the transform to artifact kind mapping."""
        assert transform_type.result_kind(source) == expected

    def test_prompt_names(self):
        """Test every transform names an existing template."""
        assert TransformType.MORE_FORMAL.prompt_name == "transform_more_formal"
        assert TransformType.FLASHCARDS.prompt_name == "transform_flashcards"


class TestArtifact:
    """Tests for Artifact."""

    def test_from_suggestion(self):
        """Test a suggestion becomes a persisted artifact."""
        suggestion = ArtifactSuggestion(kind=ArtifactKind.PLAN, title="Plan", content="...", tags=("plan", "tasks"))
        thread_id = uuid4()

        artifact = Artifact.from_suggestion(suggestion, source_thread_id=thread_id)

        assert artifact.kind == ArtifactKind.PLAN
        assert artifact.tags == ["plan", "tasks"]
        assert artifact.source_thread_id == thread_id
        assert artifact.source_turn_id is None
