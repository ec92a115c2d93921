"""Unit tests for Ari's mood engine."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from ariassist.conversation import (
    AriExpressiveness,
    AriVibe,
    AssistantMode,
    UserPreferences,
)
from ariassist.mood import CoachingActionKind, Mood, MoodEngine, MoodUpdate
from ariassist.mood.engine import FULL_GUIDANCE, SHORT_GUIDANCE


@pytest.fixture
def engine():
    """Return a mood engine."""
    return MoodEngine()


class TestComputeMood:
    """Tests for mood derivation."""

    def test_saving_an_artifact_is_celebrated(self, engine, preferences, make_history):
        """Test the saved flag beats every other signal."""
        update = engine.update(make_history(4), AssistantMode.PLAN, preferences, just_saved_artifact=True)

        assert update.mood == Mood.CELEBRATORY

    @pytest.mark.parametrize("mode,mood", [
        (AssistantMode.PLAN, Mood.FOCUSED),
        (AssistantMode.BRAINSTORM, Mood.CURIOUS),
        (AssistantMode.WRITE, Mood.SUPPORTIVE),
        (AssistantMode.SUMMARIZE, Mood.CALM),
        (AssistantMode.EXPLAIN, Mood.ENCOURAGING),
    ])
    def test_mode_mapping(self, engine, preferences, make_history, mode, mood):
        """Test each non-general mode has a fixed mood."""
        assert engine.update(make_history(12), mode, preferences).mood == mood

    @pytest.mark.parametrize("count,mood", [
        (0, Mood.CALM),
        (2, Mood.CALM),
        (3, Mood.SUPPORTIVE),
        (8, Mood.SUPPORTIVE),
        (9, Mood.FOCUSED),
        (15, Mood.FOCUSED),
        (16, Mood.ENCOURAGING),
        (40, Mood.ENCOURAGING),
    ])
    def test_general_mode_uses_message_bands(self, engine, preferences, make_history, count, mood):
        """Test general mode falls through to conversation depth."""
        assert engine.update(make_history(count), AssistantMode.GENERAL, preferences).mood == mood

    def test_no_mode_uses_message_bands(self, engine, preferences, make_history):
        """Test a missing mode behaves like general."""
        assert engine.update(make_history(5), None, preferences).mood == Mood.SUPPORTIVE

    def test_energetic_vibe_brightens_short_conversations(self, engine, make_history):
        """Test the first band is encouraging for an energetic vibe."""
        prefs = UserPreferences(ari_vibe=AriVibe.ENERGETIC)

        assert engine.update(make_history(1), None, prefs).mood == Mood.ENCOURAGING


class TestGuidance:
    """Tests for guidance lines."""

    def test_kill_switch_clears_everything(self, engine, quiet_preferences, make_history):
        """Test Ari switched off is calm and silent."""
        update = engine.update(make_history(3), AssistantMode.PLAN, quiet_preferences, just_saved_artifact=True)

        assert update == MoodUpdate.silent()
        assert update.mood == Mood.CALM
        assert update.guidance == ""
        assert update.actions == ()

    @pytest.mark.parametrize("mood", list(Mood))
    def test_low_expressiveness_uses_short_phrases(self, mood):
        """Test low expressiveness picks the short table."""
        line = MoodEngine.guidance_for(
            mood=mood,
            mode=AssistantMode.EXPLAIN,
            expressiveness=AriExpressiveness.LOW,
            vibe=AriVibe.ENERGETIC,
            message_count=0,
        )

        assert line == SHORT_GUIDANCE[mood]

    def test_calm_opening_line(self, engine, preferences):
        """Test an empty conversation gets the opening line."""
        update = engine.update([], None, preferences)

        assert update.guidance == "Let's keep things simple. What are you working on?"

    def test_calm_line_after_opening(self, engine, preferences, make_history):
        """Test calm guidance once the conversation has started."""
        update = engine.update(make_history(2), None, preferences)

        assert update.guidance == "Take your time — no rush here."

    def test_explain_has_its_own_encouraging_line(self, engine, preferences, make_history):
        """Test explain mode asks whether to simplify further."""
        update = engine.update(make_history(2), AssistantMode.EXPLAIN, preferences)

        assert update.guidance == "Nice — this is coming together clearly. Want me to simplify further?"

    def test_encouraging_outside_explain(self, engine, preferences, make_history):
        """Test the generic encouraging line for deep conversations."""
        update = engine.update(make_history(20), None, preferences)

        assert update.guidance == FULL_GUIDANCE[Mood.ENCOURAGING]

    def test_high_energetic_suffix(self, engine, energetic_preferences, make_history):
        """Test high expressiveness with an energetic vibe adds the suffix."""
        update = engine.update(make_history(4), AssistantMode.PLAN, energetic_preferences)

        assert update.guidance == FULL_GUIDANCE[Mood.FOCUSED] + " Let's go!"

    def test_medium_energetic_has_no_suffix(self, engine, make_history):
        """Test the suffix needs high expressiveness."""
        prefs = UserPreferences(ari_vibe=AriVibe.ENERGETIC)
        update = engine.update(make_history(4), AssistantMode.PLAN, prefs)

        assert not update.guidance.endswith("Let's go!")


class TestCoachingActions:
    """Tests for coaching actions."""

    @pytest.mark.parametrize("mood,kind,label", [
        (Mood.FOCUSED, CoachingActionKind.CREATE_CHECKLIST, "Take the next step"),
        (Mood.SUPPORTIVE, CoachingActionKind.CREATE_CHECKLIST, "Take the next step"),
        (Mood.ENCOURAGING, CoachingActionKind.REFINE_TONE, "Refine tone"),
        (Mood.CURIOUS, CoachingActionKind.ASK_FOLLOW_UP, "Ask a follow-up"),
        (Mood.CELEBRATORY, CoachingActionKind.ASK_FOLLOW_UP, "What's next?"),
        (Mood.CALM, CoachingActionKind.SIMPLIFY, "Simplify"),
    ])
    def test_one_action_per_mood(self, mood, kind, label):
        """Test the fixed mood to action table."""
        action = MoodEngine.coaching_action_for(mood)

        assert action.kind == kind
        assert action.label == label
        assert action.icon

    @given(
        st.integers(min_value=0, max_value=60),
        st.sampled_from([None, *AssistantMode]),
        st.sampled_from(list(AriExpressiveness)),
        st.sampled_from(list(AriVibe)),
        st.booleans(),
    )
    def test_enabled_ari_always_speaks(self, count, mode, expressiveness, vibe, saved):
        """Property test: an enabled Ari gives one line and one action."""
        prefs = UserPreferences(ari_expressiveness=expressiveness, ari_vibe=vibe)
        history = [None] * count  # only the length is read

        update = MoodEngine().update(history, mode, prefs, just_saved_artifact=saved)

        assert update.guidance
        assert len(update.actions) == 1
        assert update.actions[0].kind == MoodEngine.coaching_action_for(update.mood).kind


class TestMoodStyle:
    """Tests for mood presentation fields."""

    def test_every_mood_has_style(self):
        """Test label, icon and color exist for each mood."""
        for mood in Mood:
            assert mood.label
            assert mood.icon
            assert mood.color

    def test_unknown_raw_mood_is_none(self):
        """Test unknown stored moods decode to None."""
        assert Mood.from_raw("grumpy") is None
        assert Mood.from_raw(None) is None
        assert Mood.from_raw("curious") == Mood.CURIOUS
