"""Mood, guidance and coaching computation for Ari.

Ari's mood is derived from signals in the conversation, never from the
content the model produced:

- saving an artifact is celebrated
- the mode of the last user turn maps to a fixed mood
- otherwise the conversation depth picks a mood band

The guidance line is one short sentence shaped by the user's expressiveness
and vibe preferences. Every mood offers exactly one coaching action.

The engine is a pure function of its inputs: it never calls the generation
provider and keeps no state between calls.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING

from loguru import logger

from ..conversation.modes import AssistantMode
from ..conversation.preferences import AriExpressiveness, AriVibe, UserPreferences
from .models import CoachingAction, CoachingActionKind, Mood, MoodUpdate

if TYPE_CHECKING:
    from ..conversation.models import ConversationTurn

ENERGETIC_SUFFIX = " Let's go!"

MODE_MOODS: dict[AssistantMode, Mood] = {
    AssistantMode.PLAN: Mood.FOCUSED,
    AssistantMode.BRAINSTORM: Mood.CURIOUS,
    AssistantMode.WRITE: Mood.SUPPORTIVE,
    AssistantMode.SUMMARIZE: Mood.CALM,
    AssistantMode.EXPLAIN: Mood.ENCOURAGING,
}

SHORT_GUIDANCE: dict[Mood, str] = {
    Mood.CALM: "Ready when you are.",
    Mood.ENCOURAGING: "Looking good.",
    Mood.FOCUSED: "Staying on track.",
    Mood.CELEBRATORY: "Saved!",
    Mood.CURIOUS: "Interesting direction.",
    Mood.SUPPORTIVE: "I'm here to help.",
}

FULL_GUIDANCE: dict[Mood, str] = {
    Mood.CALM: "Take your time — no rush here.",
    Mood.ENCOURAGING: "Good progress. I can turn this into something more polished if you'd like.",
    Mood.FOCUSED: "Let's stay focused. Want the short version or the detailed one?",
    Mood.CELEBRATORY: "Nice — that's saved to your Outputs. Ready for the next thing?",
    Mood.CURIOUS: "Lots of directions here. Want me to narrow it down or keep exploring?",
    Mood.SUPPORTIVE: "I can help shape this. Just say the word.",
}
CALM_OPENING_GUIDANCE = "Let's keep things simple. What are you working on?"
EXPLAIN_ENCOURAGING_GUIDANCE = "Nice — this is coming together clearly. Want me to simplify further?"

# label, icon, kind
COACHING_ACTIONS: dict[Mood, tuple[str, str, CoachingActionKind]] = {
    Mood.FOCUSED: ("Take the next step", "arrow.right.circle", CoachingActionKind.CREATE_CHECKLIST),
    Mood.SUPPORTIVE: ("Take the next step", "arrow.right.circle", CoachingActionKind.CREATE_CHECKLIST),
    Mood.ENCOURAGING: ("Refine tone", "slider.horizontal.3", CoachingActionKind.REFINE_TONE),
    Mood.CURIOUS: ("Ask a follow-up", "bubble.left.and.bubble.right", CoachingActionKind.ASK_FOLLOW_UP),
    Mood.CELEBRATORY: ("What's next?", "sparkles", CoachingActionKind.ASK_FOLLOW_UP),
    Mood.CALM: ("Simplify", "arrow.down.right.and.arrow.up.left", CoachingActionKind.SIMPLIFY),
}


class MoodEngine:
    """Computes Ari's mood, guidance line and coaching actions."""

    def update(
        self,
        history: Sequence["ConversationTurn"],
        last_mode: AssistantMode | None,
        preferences: UserPreferences,
        just_saved_artifact: bool = False,
    ) -> MoodUpdate:
        """Derive Ari's presentation state from the conversation.

        Args:
            history: Turns of the active thread
            last_mode: Mode of the latest user turn, if any
            preferences: User preferences (kill-switch, expressiveness, vibe)
            just_saved_artifact: True right after the user saved an output

        Returns:
            MoodUpdate with mood, guidance line and coaching actions
        """
        if not preferences.ari_enabled:
            return MoodUpdate.silent()

        message_count = len(history)
        mood = self.compute_mood(
            message_count=message_count,
            last_mode=last_mode,
            just_saved_artifact=just_saved_artifact,
            vibe=preferences.ari_vibe,
        )
        guidance = self.guidance_for(
            mood=mood,
            mode=last_mode,
            expressiveness=preferences.ari_expressiveness,
            vibe=preferences.ari_vibe,
            message_count=message_count,
        )
        update = MoodUpdate(mood=mood, guidance=guidance, actions=(self.coaching_action_for(mood),))
        logger.debug(f"Ari mood={mood.value} turns={message_count} mode={last_mode}")
        return update

    @staticmethod
    def compute_mood(
        message_count: int,
        last_mode: AssistantMode | None,
        just_saved_artifact: bool,
        vibe: AriVibe,
    ) -> Mood:
        if just_saved_artifact:
            return Mood.CELEBRATORY

        if last_mode is not None and last_mode in MODE_MOODS:
            return MODE_MOODS[last_mode]

        # General mode and no mode both fall back to conversation depth
        if message_count <= 2:
            return Mood.ENCOURAGING if vibe == AriVibe.ENERGETIC else Mood.CALM
        if message_count <= 8:
            return Mood.SUPPORTIVE
        if message_count <= 15:
            return Mood.FOCUSED
        return Mood.ENCOURAGING

    @staticmethod
    def guidance_for(
        mood: Mood,
        mode: AssistantMode | None,
        expressiveness: AriExpressiveness,
        vibe: AriVibe,
        message_count: int,
    ) -> str:
        if expressiveness == AriExpressiveness.LOW:
            return SHORT_GUIDANCE[mood]

        if mood == Mood.CALM and message_count == 0:
            line = CALM_OPENING_GUIDANCE
        elif mood == Mood.ENCOURAGING and mode == AssistantMode.EXPLAIN:
            line = EXPLAIN_ENCOURAGING_GUIDANCE
        else:
            line = FULL_GUIDANCE[mood]

        if vibe == AriVibe.ENERGETIC and expressiveness == AriExpressiveness.HIGH:
            return line + ENERGETIC_SUFFIX
        return line

    @staticmethod
    def coaching_action_for(mood: Mood) -> CoachingAction:
        label, icon, kind = COACHING_ACTIONS[mood]
        return CoachingAction(label=label, icon=icon, kind=kind)
