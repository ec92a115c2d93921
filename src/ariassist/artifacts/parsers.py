"""Line-oriented parsers for structured model output.

Transform prompts ask the model for fixed grammars:

    Quiz          Flashcards          Bullets
    Q: text       Q: text             ## Header
    A) option     A: text             • item
    B) option                         • item
    C) option     Q: text
    D) option     A: text
    Correct: B

Models do not always comply, so the parsers are lenient: they tolerate bold
markers, numbering and bullet prefixes, and they never raise. When a parser
returns nothing the caller should show the raw text instead.

Each parser has a matching ``format_*`` function writing records back in the
same grammar; parsing the formatted text yields the same records.
"""

import re

from pydantic import BaseModel, ConfigDict

_EMPHASIS = "**"
_NUMBERING = re.compile(r"^\d+[.)]\s*")
_NUMBERED_ITEM = re.compile(r"^\d+[.)]\s")
_QUIZ_OPTION = re.compile(r"^([A-D])[).:]")
_HEADER_MARKS = re.compile(r"^#{1,3}\s*")

_QUIZ_QUESTION_PREFIXES = ("question:", "q:")
_QUIZ_CORRECT_PREFIXES = ("correct:", "answer:")
_CARD_FRONT_PREFIXES = ("question:", "front:", "q:")
_CARD_BACK_PREFIXES = ("answer:", "back:", "a:")
_BULLET_MARKERS = ("• ", "- ", "* ")
_HEADER_PREFIXES = ("## ", "### ")


class QuizOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    letter: str
    text: str


class QuizQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    question: str
    options: tuple[QuizOption, ...]
    correct_letter: str

    @property
    def correct_option(self) -> QuizOption | None:
        for option in self.options:
            if option.letter == self.correct_letter:
                return option
        return None


class Flashcard(BaseModel):
    model_config = ConfigDict(frozen=True)

    front: str
    back: str


class BulletSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    header: str | None = None
    items: tuple[str, ...] = ()

    def to_markdown(self) -> str:
        lines = [f"## {self.header}"] if self.header is not None else []
        lines.extend(f"• {item}" for item in self.items)
        return "\n".join(lines)


def _clean(line: str) -> str:
    """Trim, drop bold markers and leading numbering."""
    cleaned = line.strip().replace(_EMPHASIS, "")
    return _NUMBERING.sub("", cleaned, count=1)


def _strip_prefix(cleaned: str, prefixes: tuple[str, ...]) -> str | None:
    """Return the text after the first matching case-insensitive prefix."""
    lowered = cleaned.lower()
    for prefix in prefixes:
        if lowered.startswith(prefix):
            return cleaned[len(prefix):].strip()
    return None


def parse_quiz(text: str) -> list[QuizQuestion]:
    """Parse multiple-choice questions.

    A question is kept only if it has at least one option. Without a
    ``Correct:`` line the first option's letter is taken as correct; a
    ``Correct:`` line with no value leaves the letter empty.
    """
    questions: list[QuizQuestion] = []
    current_question: str | None = None
    current_options: list[QuizOption] = []
    correct_letter: str | None = None

    def flush() -> None:
        nonlocal current_question, current_options, correct_letter
        if current_question is not None and current_options:
            questions.append(QuizQuestion(
                question=current_question,
                options=tuple(current_options),
                correct_letter=correct_letter if correct_letter is not None else current_options[0].letter,
            ))
        current_question = None
        current_options = []
        correct_letter = None

    for line in text.splitlines():
        cleaned = _clean(line)

        question = _strip_prefix(cleaned, _QUIZ_QUESTION_PREFIXES)
        if question is not None:
            flush()
            current_question = question
            continue

        option = _QUIZ_OPTION.match(cleaned)
        if option is not None:
            current_options.append(QuizOption(
                letter=option.group(1),
                text=cleaned[option.end():].strip(),
            ))
            continue

        answer = _strip_prefix(cleaned, _QUIZ_CORRECT_PREFIXES)
        if answer is not None:
            # an empty value is kept as an empty letter
            correct_letter = answer[:1].upper()

    flush()
    return questions


def parse_flashcards(text: str) -> list[Flashcard]:
    """Parse question/answer cards.

    Accepts ``Q:/A:``, ``Front:/Back:`` and ``Question:/Answer:`` prefixes in
    any case, optionally numbered or bulleted. Unprefixed lines continue the
    answer if one is open, otherwise the question. Cards missing either side
    are dropped.
    """
    cards: list[Flashcard] = []
    front: str | None = None
    back: str | None = None

    def flush() -> None:
        nonlocal front, back
        if front and back:
            cards.append(Flashcard(front=front, back=back))
        front = None
        back = None

    for line in text.splitlines():
        cleaned = _clean(line)
        for marker in ("- ", "• "):
            if cleaned.startswith(marker):
                cleaned = cleaned[len(marker):]

        question = _strip_prefix(cleaned, _CARD_FRONT_PREFIXES)
        if question is not None:
            flush()
            front = question
            continue

        answer = _strip_prefix(cleaned, _CARD_BACK_PREFIXES)
        if answer is not None:
            back = answer
            continue

        if cleaned:
            if back is not None:
                back += " " + cleaned
            elif front is not None:
                front += " " + cleaned

    flush()
    return cards


def parse_bullets(text: str) -> list[BulletSection]:
    """Parse an outline into sections of items.

    ``##``/``###`` lines open a new section. Bulleted and numbered lines become
    items with their marker removed; any other non-blank line is an item too.
    """
    sections: list[BulletSection] = []
    header: str | None = None
    items: list[str] = []

    def flush() -> None:
        nonlocal items
        if items or header is not None:
            sections.append(BulletSection(header=header, items=tuple(items)))
        items = []

    for line in text.splitlines():
        trimmed = line.strip()
        if not trimmed:
            continue

        if trimmed.startswith(_HEADER_PREFIXES):
            flush()
            header = _HEADER_MARKS.sub("", trimmed, count=1)
        elif trimmed.startswith(_BULLET_MARKERS):
            item = trimmed[2:].strip().replace(_EMPHASIS, "")
            if item:
                items.append(item)
        elif _NUMBERED_ITEM.match(trimmed):
            item = _NUMBERING.sub("", trimmed, count=1).replace(_EMPHASIS, "")
            if item:
                items.append(item)
        else:
            items.append(trimmed.replace(_EMPHASIS, ""))

    flush()
    return sections


def format_quiz(questions: list[QuizQuestion]) -> str:
    blocks = []
    for question in questions:
        lines = [f"Q: {question.question}"]
        lines.extend(f"{option.letter}) {option.text}" for option in question.options)
        lines.append(f"Correct: {question.correct_letter}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def format_flashcards(cards: list[Flashcard]) -> str:
    return "\n\n".join(f"Q: {card.front}\nA: {card.back}" for card in cards)


def format_bullets(sections: list[BulletSection]) -> str:
    return "\n\n".join(section.to_markdown() for section in sections)
