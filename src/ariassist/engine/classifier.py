"""Keyword-based intent classification.

Categories are checked in a fixed priority order and the first category with
a keyword appearing anywhere in the lower-cased input wins, even when a later
category also matches. Routing must stay reproducible, so the order and the
keyword lists are part of the contract.
"""

from ..conversation.modes import AssistantMode

INTENT_KEYWORDS: tuple[tuple[AssistantMode, tuple[str, ...]], ...] = (
    (AssistantMode.WRITE, ("write", "draft", "compose", "create", "letter", "email", "essay", "blog")),
    (AssistantMode.SUMMARIZE, ("summarize", "summary", "tldr", "tl;dr", "shorten", "condense", "gist")),
    (AssistantMode.EXPLAIN, ("explain", "what is", "what are", "how does", "why", "define", "meaning")),
    (AssistantMode.PLAN, ("plan", "schedule", "outline", "steps", "roadmap", "strategy", "organize")),
    (AssistantMode.BRAINSTORM, ("brainstorm", "ideas", "suggest", "alternatives", "options", "creative")),
)


def classify_intent(text: str) -> AssistantMode:
    """Classify user input into an AssistantMode.

    Args:
        text: Raw user input

    Returns:
        The first mode whose keywords match, or ``AssistantMode.GENERAL``
    """
    lowered = text.lower()
    for mode, keywords in INTENT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return mode
    return AssistantMode.GENERAL
