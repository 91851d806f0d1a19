"""
State Machine Parser
====================
Deterministic two-state scanner that walks preprocessed lines and
assembles one raw block (question text + options + answer line) per
question, handing each finished block to the validator.

States:
    SEEK     between questions; section headers update the default type
    COLLECT  inside a question block; options and the answer are gathered

The scan state is an immutable value threaded through ``step``; one call
performs exactly one transition.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .answers import normalize_answer
from .models import ParseResult, QuestionType
from .progress import ProgressEmitter
from .recognizers import (
    detect_section_type,
    match_answer_marker,
    match_option,
    match_question_start,
)
from .validator import BlockOutcome, QuestionValidator

logger = logging.getLogger(__name__)


class ScanMode(Enum):
    """Scanner position relative to question blocks."""
    SEEK = "SEEK"
    COLLECT = "COLLECT"


@dataclass(frozen=True)
class RawBlock:
    """Unvalidated pieces of one question, discarded after validation."""
    question_text: str
    question_type: QuestionType
    options: tuple[str, ...] = ()
    answer_text: Optional[str] = None


@dataclass(frozen=True)
class ScanState:
    """Cursor, default type and id counter for one parse invocation."""
    cursor: int = 0
    mode: ScanMode = ScanMode.SEEK
    current_type: QuestionType = QuestionType.MULTIPLE
    next_id: int = 1
    block: Optional[RawBlock] = None


class BlockScanner:
    """
    Drives a cursor across the line sequence, one transition per ``step``.
    """

    def __init__(self, validator: Optional[QuestionValidator] = None):
        self.validator = validator or QuestionValidator()

    def is_finished(self, lines: list[str], state: ScanState) -> bool:
        return state.cursor >= len(lines) and state.mode == ScanMode.SEEK

    def step(
        self, lines: list[str], state: ScanState
    ) -> tuple[ScanState, Optional[BlockOutcome]]:
        """
        Perform a single state transition.

        Returns:
            The next state and, when a block was finished, its outcome.
        """
        if state.cursor >= len(lines):
            if state.mode == ScanMode.COLLECT and state.block:
                logger.debug("Input exhausted inside a question block")
                return self._finish_block(state, state.block, advance=0)
            return replace(state, mode=ScanMode.SEEK, block=None), None

        line = lines[state.cursor]

        if state.mode == ScanMode.SEEK:
            return self._seek(line, state), None
        return self._collect(line, state)

    def scan(
        self,
        lines: list[str],
        state: Optional[ScanState] = None,
        result: Optional[ParseResult] = None,
        progress: Optional[ProgressEmitter] = None,
    ) -> tuple[ScanState, ParseResult]:
        """Run ``step`` until the lines are exhausted, collecting outcomes."""
        state = state or ScanState()
        result = result if result is not None else ParseResult()
        progress = progress or ProgressEmitter()
        total = len(lines)

        while not self.is_finished(lines, state):
            progress.scan_progress(
                min(state.cursor, total), total, len(result.questions)
            )
            state, outcome = self.step(lines, state)
            if outcome is not None:
                self.apply_outcome(result, outcome)

        return state, result

    def apply_outcome(self, result: ParseResult, outcome: BlockOutcome):
        """Append a finished block's question, error or warning."""
        prefix = f"Question {outcome.question_id}: "

        if outcome.question is not None:
            result.questions.append(outcome.question)
            logger.debug(
                f"Accepted question {outcome.question_id} "
                f"({outcome.question.type.value})"
            )

        if outcome.error:
            logger.info(f"Rejected question {outcome.question_id}: {outcome.error}")
            result.errors.append(prefix + outcome.error)

        if outcome.warning:
            result.warnings.append(prefix + outcome.warning)

    # ─── Transitions ──────────────────────────────────────────────────────

    def _seek(self, line: str, state: ScanState) -> ScanState:
        section_type = detect_section_type(line)
        if section_type is not None:
            logger.debug(f"Section header '{line}' → {section_type.value}")
            return replace(
                state, cursor=state.cursor + 1, current_type=section_type
            )

        question_text = match_question_start(line)
        if question_text is not None:
            logger.debug(f"Question start at line {state.cursor + 1}")
            block = RawBlock(
                question_text=question_text,
                question_type=state.current_type,
            )
            return replace(
                state,
                cursor=state.cursor + 1,
                mode=ScanMode.COLLECT,
                block=block,
            )

        return replace(state, cursor=state.cursor + 1)

    def _collect(
        self, line: str, state: ScanState
    ) -> tuple[ScanState, Optional[BlockOutcome]]:
        block = state.block

        answer_text = match_answer_marker(line)
        if answer_text is not None:
            block = replace(block, answer_text=answer_text)
            return self._finish_block(state, block, advance=1)

        option = match_option(line)
        if option is not None:
            block = replace(block, options=block.options + (option,))
            return replace(state, cursor=state.cursor + 1, block=block), None

        if match_question_start(line) is not None:
            # Next question begins before an answer; rescan this line in SEEK
            return self._finish_block(state, block, advance=0)

        return replace(state, cursor=state.cursor + 1), None

    def _finish_block(
        self, state: ScanState, block: RawBlock, advance: int
    ) -> tuple[ScanState, BlockOutcome]:
        answer = (
            normalize_answer(block.answer_text)
            if block.answer_text is not None
            else []
        )
        outcome = self.validator.resolve(
            question_id=state.next_id,
            question_type=block.question_type,
            question_text=block.question_text,
            options=list(block.options),
            answer=answer,
        )

        next_id = state.next_id + 1 if outcome.question is not None else state.next_id
        next_state = replace(
            state,
            cursor=state.cursor + advance,
            mode=ScanMode.SEEK,
            next_id=next_id,
            block=None,
        )
        return next_state, outcome
