"""Markdown export schemas for each artifact kind.

Each schema is a small typed view of an artifact's content that renders to a
markdown document. The ``from_*`` constructors build schemas straight from
parser output so transformed content can be exported.
"""

from pydantic import BaseModel, Field

from .parsers import BulletSection, Flashcard, QuizQuestion

_LETTERS = ("A", "B", "C", "D", "E")


def _letter(index: int, fallback: str) -> str:
    return _LETTERS[index] if 0 <= index < len(_LETTERS) else fallback


class ChecklistItem(BaseModel):
    text: str
    done: bool = False


class ChecklistSchema(BaseModel):
    title: str
    items: list[ChecklistItem] = Field(default_factory=list)

    @classmethod
    def from_sections(cls, title: str, sections: list[BulletSection]) -> "ChecklistSchema":
        items = [ChecklistItem(text=item) for section in sections for item in section.items]
        return cls(title=title, items=items)

    def to_markdown(self) -> str:
        md = f"# {self.title}\n\n"
        for item in self.items:
            check = "[x]" if item.done else "[ ]"
            md += f"- {check} {item.text}\n"
        return md


class PlanBlock(BaseModel):
    heading: str
    tasks: list[str] = Field(default_factory=list)


class PlanSchema(BaseModel):
    title: str
    blocks: list[PlanBlock] = Field(default_factory=list)

    @classmethod
    def from_sections(cls, title: str, sections: list[BulletSection]) -> "PlanSchema":
        blocks = [
            PlanBlock(heading=section.header or "Tasks", tasks=list(section.items))
            for section in sections
        ]
        return cls(title=title, blocks=blocks)

    def to_markdown(self) -> str:
        md = f"# {self.title}\n\n"
        for block in self.blocks:
            md += f"## {block.heading}\n\n"
            for task in block.tasks:
                md += f"- [ ] {task}\n"
            md += "\n"
        return md


class TableSchema(BaseModel):
    title: str
    columns: list[str]
    rows: list[list[str]] = Field(default_factory=list)

    def to_markdown(self) -> str:
        md = f"# {self.title}\n\n"
        md += "| " + " | ".join(self.columns) + " |\n"
        md += "| " + " | ".join("---" for _ in self.columns) + " |\n"
        width = len(self.columns)
        for row in self.rows:
            # short rows are padded, long rows truncated to the header width
            padded = (row + [""] * max(0, width - len(row)))[:width]
            md += "| " + " | ".join(padded) + " |\n"
        return md


class SummarySchema(BaseModel):
    title: str
    summary: str
    key_points: list[str] = Field(default_factory=list)

    def to_markdown(self) -> str:
        md = f"# {self.title}\n\n{self.summary}\n\n"
        if self.key_points:
            md += "## Key Points\n\n"
            for point in self.key_points:
                md += f"- {point}\n"
        return md


class DraftSchema(BaseModel):
    title: str
    body: str
    tone: str | None = None

    def to_markdown(self) -> str:
        return f"# {self.title}\n\n{self.body}"


class QuizSchemaQuestion(BaseModel):
    question: str
    options: list[str]
    answer: int = Field(description="Index of the correct option")


class QuizSchema(BaseModel):
    title: str
    questions: list[QuizSchemaQuestion] = Field(default_factory=list)

    @classmethod
    def from_questions(cls, title: str, questions: list[QuizQuestion]) -> "QuizSchema":
        converted = []
        for question in questions:
            letters = [option.letter for option in question.options]
            answer = letters.index(question.correct_letter) if question.correct_letter in letters else -1
            converted.append(QuizSchemaQuestion(
                question=question.question,
                options=[option.text for option in question.options],
                answer=answer,
            ))
        return cls(title=title, questions=converted)

    def to_markdown(self) -> str:
        md = f"# {self.title}\n\n"
        for i, question in enumerate(self.questions, 1):
            md += f"### Question {i}\n\n{question.question}\n\n"
            for j, option in enumerate(question.options):
                md += f"- **{_letter(j, str(j))}.** {option}\n"
            md += f"\n*Answer: {_letter(question.answer, '?')}*\n\n"
        return md


class FlashcardSchema(BaseModel):
    title: str
    cards: list[Flashcard] = Field(default_factory=list)

    @classmethod
    def from_cards(cls, title: str, cards: list[Flashcard]) -> "FlashcardSchema":
        return cls(title=title, cards=list(cards))

    def to_markdown(self) -> str:
        md = f"# {self.title}\n\n"
        for i, card in enumerate(self.cards, 1):
            md += f"### Card {i}\n\n"
            md += f"**Q:** {card.front}\n\n"
            md += f"**A:** {card.back}\n\n---\n\n"
        return md
