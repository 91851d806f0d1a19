"""
Data Models
===========
Pydantic models for structured question-bank output.
All models are serializable to JSON for the persistence layer.
"""

from __future__ import annotations

from collections import Counter
from enum import Enum

from pydantic import BaseModel, Field, computed_field, field_validator


# ─── Enums ────────────────────────────────────────────────────────────────────


class QuestionType(str, Enum):
    """Supported question formats."""
    SINGLE = "single"
    MULTIPLE = "multiple"
    JUDGE = "judge"
    INDEFINITE = "indefinite"


class IssueType(str, Enum):
    """Reasons a block is rejected or flagged during validation."""
    EMPTY_QUESTION_TEXT = "empty_question_text"
    JUDGE_OPTIONS_ADDED = "judge_options_added"
    MISSING_OPTIONS = "missing_options"
    MISSING_ANSWER = "missing_answer"
    INVALID_ANSWER_LABEL = "invalid_answer_label"
    SINGLE_MULTIPLE_ANSWERS = "single_multiple_answers"
    JUDGE_MULTIPLE_ANSWERS = "judge_multiple_answers"
    DUPLICATE_OPTION_LABEL = "duplicate_option_label"
    MALFORMED_OPTION = "malformed_option"


ISSUE_MESSAGES: dict[IssueType, str] = {
    IssueType.EMPTY_QUESTION_TEXT: "question text is empty",
    IssueType.JUDGE_OPTIONS_ADDED: "auto-added standard options for judge question",
    IssueType.MISSING_OPTIONS: "no valid options found",
    IssueType.MISSING_ANSWER: "no correct answer found",
    IssueType.INVALID_ANSWER_LABEL: "answer references invalid option(s): {labels}",
    IssueType.SINGLE_MULTIPLE_ANSWERS: "single-choice question has multiple answers, verify type",
    IssueType.JUDGE_MULTIPLE_ANSWERS: "judge question cannot have multiple answers",
    IssueType.DUPLICATE_OPTION_LABEL: "duplicate option label(s): {labels}",
    IssueType.MALFORMED_OPTION: "malformed option: {labels}",
}


def issue_message(issue: IssueType, labels: list[str] | None = None) -> str:
    """Render the human-readable message for an issue."""
    return ISSUE_MESSAGES[issue].format(labels=", ".join(labels or []))


# ─── Option Model ─────────────────────────────────────────────────────────────


def option_label(rendered: str) -> str:
    """Label of a rendered option ("B.text" → "B")."""
    return rendered[:1]


class OptionEntry(BaseModel):
    """
    One answer option of a question.
    Rendered canonically as "<label>.<text>".
    """
    label: str = Field(pattern=r"^[A-Z]$")
    text: str = ""

    def render(self) -> str:
        return f"{self.label}.{self.text}"

    @classmethod
    def from_rendered(cls, rendered: str) -> "OptionEntry":
        """Split a rendered option ("A.text") back into label and text."""
        label = option_label(rendered)
        text = rendered[2:] if rendered[1:2] == "." else rendered[1:]
        return cls(label=label, text=text)


# ─── Question Model ──────────────────────────────────────────────────────────


class Question(BaseModel):
    """
    A validated question record.
    Every answer label refers to one of the question's options.
    """
    id: int = Field(ge=1)
    type: QuestionType
    question: str = Field(min_length=1)
    options: list[str] = Field(default_factory=list)
    answer: list[str] = Field(default_factory=list)

    @field_validator("question")
    @classmethod
    def _question_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("question text must not be blank")
        return value


# ─── Parse Result Model ──────────────────────────────────────────────────────


class ParseResult(BaseModel):
    """
    Complete output of a parse run.
    This is the structure handed to the persistence / UI layers.
    """
    questions: list[Question] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @computed_field
    @property
    def question_count(self) -> int:
        return len(self.questions)

    @computed_field
    @property
    def type_breakdown(self) -> dict[str, int]:
        counts = Counter(q.type.value for q in self.questions)
        return dict(sorted(counts.items()))

    @computed_field
    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
