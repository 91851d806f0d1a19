"""
Question Parser Engine
======================
Main orchestrator that combines preprocessing, block scanning,
validation and progress reporting into a complete text parsing pipeline.

Usage:
    engine = ParserEngine(config)
    result = engine.parse(raw_text, existing_questions, on_progress)
    # result is a ParseResult with questions, errors and warnings

Architecture:
    Text → Preprocessor → Lines → BlockScanner (recognizers, answer
    normalizer, validator) → ParseResult

The engine never raises: internal faults become a single error entry and
every question accumulated so far is still returned.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .models import ParseResult, QuestionType
from .preprocess import normalize_text, split_lines
from .progress import (
    ANALYZE_PERCENT,
    COMPLETE_PERCENT,
    DETECT_PERCENT,
    SPLIT_PERCENT,
    VALIDATE_PERCENT,
    ProgressCallback,
    ProgressEmitter,
)
from .state_machine import BlockScanner, ScanState
from .validator import QuestionValidator

logger = logging.getLogger(__name__)

NO_QUESTIONS_ERROR = "no valid questions could be parsed, check the format"
UNEXPECTED_ERROR = "unexpected error during parsing: {error}"

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class ParserConfig:
    """Configuration for the parser engine."""

    # Type applied to questions before any section header is seen
    default_type: QuestionType = QuestionType.MULTIPLE

    # Reject blocks whose options repeat a label
    strict_labels: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None


def next_question_id(existing_questions: Iterable[Any]) -> int:
    """
    First free id after the existing questions (1 for an empty bank).

    Records without an integer id are skipped, and ids below 1 never pull
    the counter under 1.
    """
    highest = 0
    for q in existing_questions:
        qid = q.get("id") if isinstance(q, Mapping) else getattr(q, "id", None)
        if not isinstance(qid, int) or isinstance(qid, bool):
            logger.warning(f"Ignoring existing question with unusable id {qid!r}")
            continue
        highest = max(highest, qid)
    return highest + 1


class ParserEngine:
    """
    Main question-bank parsing engine.

    Orchestrates the full pipeline:
        1. Text normalization
        2. Line splitting
        3. Block scanning (type detection, recognizers, validation)
        4. Document-level validation

    Each call owns its scan state, so one engine may serve concurrent
    parses of separate inputs.
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config or ParserConfig()
        self.validator = QuestionValidator(strict_labels=self.config.strict_labels)
        self.scanner = BlockScanner(self.validator)
        self._setup_logging()

    def _setup_logging(self):
        """Configure logging based on config."""
        log_level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        package_logger = logging.getLogger("exam_parser")
        package_logger.setLevel(log_level)

        # Console handler
        if not package_logger.handlers:
            console = logging.StreamHandler()
            console.setLevel(log_level)
            console.setFormatter(
                logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
            )
            package_logger.addHandler(console)

        # File handler
        if self.config.log_file:
            log_path = Path(self.config.log_file).resolve()
            already_attached = any(
                isinstance(h, logging.FileHandler)
                and Path(h.baseFilename) == log_path
                for h in package_logger.handlers
            )
            if not already_attached:
                log_path.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_path, encoding="utf-8")
                file_handler.setLevel(log_level)
                file_handler.setFormatter(
                    logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
                )
                package_logger.addHandler(file_handler)

    def parse(
        self,
        raw_text: str,
        existing_questions: Iterable[Any] = (),
        on_progress: Optional[ProgressCallback] = None,
    ) -> ParseResult:
        """
        Parse question-bank text into validated question records.

        Args:
            raw_text: Plain text extracted from a document or pasted.
            existing_questions: Questions already in the bank (Question
                instances or mappings with an "id"); only used to pick
                the first new id.
            on_progress: Callback(percent, message) invoked at milestones.

        Returns:
            ParseResult with questions, errors and warnings.
        """
        result = ParseResult()
        progress = ProgressEmitter(on_progress)

        try:
            for _ in self._pipeline(raw_text, existing_questions, result, progress):
                pass
        except Exception as e:
            self._record_failure(result, progress, e)

        return result

    async def parse_async(
        self,
        raw_text: str,
        existing_questions: Iterable[Any] = (),
        on_progress: Optional[ProgressCallback] = None,
    ) -> ParseResult:
        """
        Same as ``parse`` but yields to the event loop after each
        milestone so a host UI can repaint between chunks of work.
        """
        result = ParseResult()
        progress = ProgressEmitter(on_progress)

        try:
            for _ in self._pipeline(raw_text, existing_questions, result, progress):
                await asyncio.sleep(0)
        except Exception as e:
            self._record_failure(result, progress, e)

        return result

    def _pipeline(
        self,
        raw_text: str,
        existing_questions: Iterable[Any],
        result: ParseResult,
        progress: ProgressEmitter,
    ) -> Iterator[int]:
        """Run the parse, yielding after every progress milestone."""
        start_time = time.time()

        # ── Step 1: Normalize text ────────────────────────────────────
        progress.emit(ANALYZE_PERCENT, "Analyzing document structure...")
        yield ANALYZE_PERCENT
        text = normalize_text(raw_text)

        # ── Step 2: Split lines ───────────────────────────────────────
        progress.emit(SPLIT_PERCENT, "Splitting text into lines...")
        yield SPLIT_PERCENT
        lines = split_lines(text)

        # ── Step 3: Scan blocks ───────────────────────────────────────
        progress.emit(DETECT_PERCENT, "Detecting question types...")
        yield DETECT_PERCENT
        state = ScanState(
            current_type=self.config.default_type,
            next_id=next_question_id(existing_questions),
        )
        logger.info(
            f"Scanning {len(lines)} lines, first new id {state.next_id}"
        )
        self.scanner.scan(lines, state, result, progress)

        # ── Step 4: Document-level validation ─────────────────────────
        progress.emit(VALIDATE_PERCENT, "Validating question format...")
        yield VALIDATE_PERCENT
        if not result.questions:
            logger.warning("No questions parsed from input")
            result.errors.append(NO_QUESTIONS_ERROR)

        self._log_summary(result, len(lines), time.time() - start_time)

        progress.emit(
            COMPLETE_PERCENT,
            f"Parsing complete, found {len(result.questions)} questions",
        )
        yield COMPLETE_PERCENT

    def _record_failure(
        self, result: ParseResult, progress: ProgressEmitter, error: Exception
    ):
        logger.exception("Parsing aborted by an unexpected error")
        result.errors.append(UNEXPECTED_ERROR.format(error=error))
        progress.emit(COMPLETE_PERCENT, "An error occurred during parsing")

    def _log_summary(self, result: ParseResult, line_count: int, elapsed: float):
        logger.info("=" * 60)
        logger.info("PARSE REPORT")
        logger.info("=" * 60)
        logger.info(f"Lines Scanned: {line_count}")
        logger.info(f"Questions Accepted: {len(result.questions)}")
        for type_name, count in result.type_breakdown.items():
            logger.info(f"  • {type_name}: {count}")
        logger.info(f"Errors: {len(result.errors)}")
        logger.info(f"Warnings: {len(result.warnings)}")
        logger.info(f"Elapsed: {elapsed:.2f}s")
        logger.info("=" * 60)


def parse(
    raw_text: str,
    existing_questions: Iterable[Any] = (),
    on_progress: Optional[ProgressCallback] = None,
    config: Optional[ParserConfig] = None,
) -> ParseResult:
    """Parse text with a one-off engine."""
    return ParserEngine(config).parse(raw_text, existing_questions, on_progress)
