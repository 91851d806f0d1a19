"""
Validation Engine
=================
Per-block validation and repair.

Given a block's question text, collected options, normalized answer and
active question type, decides whether the block becomes a Question:

    - Rejects empty text, missing options, missing answers
    - Rejects answers that reference labels no option carries
    - Rejects judge questions with more than one answer
    - Synthesizes "A.正确" / "B.错误" for judge questions without options
    - Maps judge correctness words (正确/错误/TRUE/FALSE...) onto labels
    - Warns when a single-choice question carries several answers

A rejected block yields exactly one error and never a warning.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from pydantic import ValidationError

from .models import (
    IssueType,
    OptionEntry,
    Question,
    QuestionType,
    issue_message,
    option_label,
)

logger = logging.getLogger(__name__)

JUDGE_DEFAULT_OPTIONS = [
    OptionEntry(label="A", text="正确").render(),
    OptionEntry(label="B", text="错误").render(),
]

JUDGE_TRUE_WORDS = frozenset({"正确", "对", "TRUE", "T"})
JUDGE_FALSE_WORDS = frozenset({"错误", "错", "FALSE", "F"})


@dataclass
class ValidationOutcome:
    """Options and answer as resolved by validation, plus its verdict."""
    options: list[str] = field(default_factory=list)
    answer: list[str] = field(default_factory=list)
    issue: Optional[IssueType] = None
    error: Optional[str] = None
    warning: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class BlockOutcome:
    """What a finished block contributes to the parse result."""
    question_id: int
    question: Optional[Question] = None
    error: Optional[str] = None
    warning: Optional[str] = None


class QuestionValidator:
    """
    Enforces question record invariants on one block at a time.

    Args:
        strict_labels: Reject blocks whose options repeat a label.
    """

    def __init__(self, strict_labels: bool = False):
        self.strict_labels = strict_labels

    def validate(
        self,
        question_text: str,
        options: list[str],
        answer: list[str],
        question_type: QuestionType,
    ) -> ValidationOutcome:
        """
        Validate and repair one block.

        Args:
            question_text: Body text captured by the question-start line.
            options: Canonical "<LABEL>.<text>" option strings.
            answer: Labels from the answer normalizer.
            question_type: Type active when the block started.

        Returns:
            ValidationOutcome with the resolved options/answer and either
            an error or an optional warning.
        """
        outcome = ValidationOutcome(options=list(options), answer=list(answer))

        if not question_text.strip():
            return self._reject(outcome, IssueType.EMPTY_QUESTION_TEXT)

        if question_type == QuestionType.JUDGE:
            if not outcome.options:
                outcome.options = list(JUDGE_DEFAULT_OPTIONS)
                outcome.issue = IssueType.JUDGE_OPTIONS_ADDED
                outcome.warning = issue_message(IssueType.JUDGE_OPTIONS_ADDED)
                logger.debug("Added standard judge options")
            outcome.answer = self._map_judge_words(outcome.options, outcome.answer)

        if not outcome.options:
            return self._reject(outcome, IssueType.MISSING_OPTIONS)

        labels = [option_label(opt) for opt in outcome.options]

        if self.strict_labels:
            duplicates = sorted({lbl for lbl in labels if labels.count(lbl) > 1})
            if duplicates:
                return self._reject(
                    outcome, IssueType.DUPLICATE_OPTION_LABEL, duplicates
                )

        if not outcome.answer:
            return self._reject(outcome, IssueType.MISSING_ANSWER)

        invalid = [ans for ans in outcome.answer if ans not in labels]
        if invalid:
            return self._reject(outcome, IssueType.INVALID_ANSWER_LABEL, invalid)

        if question_type == QuestionType.SINGLE and len(outcome.answer) > 1:
            outcome.issue = IssueType.SINGLE_MULTIPLE_ANSWERS
            outcome.warning = issue_message(IssueType.SINGLE_MULTIPLE_ANSWERS)

        if question_type == QuestionType.JUDGE and len(outcome.answer) > 1:
            return self._reject(outcome, IssueType.JUDGE_MULTIPLE_ANSWERS)

        return outcome

    def resolve(
        self,
        question_id: int,
        question_type: QuestionType,
        question_text: str,
        options: list[str],
        answer: list[str],
    ) -> BlockOutcome:
        """Validate a block and build its Question when accepted."""
        outcome = self.validate(question_text, options, answer, question_type)
        if not outcome.is_valid:
            return BlockOutcome(question_id=question_id, error=outcome.error)

        question = Question(
            id=question_id,
            type=question_type,
            question=question_text.strip(),
            options=outcome.options,
            answer=outcome.answer,
        )
        return BlockOutcome(
            question_id=question_id,
            question=question,
            warning=outcome.warning,
        )

    def check_question(self, question: Question) -> Optional[str]:
        """Re-validate an existing record; returns the error, if any."""
        for rendered in question.options:
            try:
                OptionEntry.from_rendered(rendered)
            except ValidationError:
                return issue_message(IssueType.MALFORMED_OPTION, [rendered])
        outcome = self.validate(
            question.question, question.options, question.answer, question.type
        )
        return outcome.error

    def _map_judge_words(
        self, options: list[str], answer: list[str]
    ) -> list[str]:
        """Map a single correctness word onto the first/second option label."""
        if len(answer) != 1:
            return answer

        word = answer[0].upper()
        if word in JUDGE_TRUE_WORDS and options:
            return [option_label(options[0])]
        if word in JUDGE_FALSE_WORDS and len(options) > 1:
            return [option_label(options[1])]
        return answer

    def _reject(
        self,
        outcome: ValidationOutcome,
        issue: IssueType,
        labels: Optional[list[str]] = None,
    ) -> ValidationOutcome:
        outcome.issue = issue
        outcome.error = issue_message(issue, labels)
        outcome.warning = None
        return outcome
