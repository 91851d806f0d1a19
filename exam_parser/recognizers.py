"""
Line Recognizers
================
Independent classifiers for a single preprocessed line:

    - Section headers that switch the default question type
    - Question starts ("1.", "1、", "第1题：", "题目1：")
    - Options ("A.", "A、", "A ", "（A）", "(A)")
    - Answer markers ("正确答案：", "答案:", ...)

Each recognizer walks an ordered table; the first match wins. Later
patterns are more permissive, so table order must be preserved.
"""

from __future__ import annotations

import re
from typing import NamedTuple, Optional

from .models import OptionEntry, QuestionType


class LinePattern(NamedTuple):
    """A named line shape. The last capture group holds the body text."""
    name: str
    pattern: re.Pattern


# ─── Section Headers ──────────────────────────────────────────────────────────

SECTION_MARKERS: list[tuple[str, QuestionType]] = [
    ("多选题", QuestionType.MULTIPLE),
    ("多项选择", QuestionType.MULTIPLE),
    ("单选题", QuestionType.SINGLE),
    ("单项选择", QuestionType.SINGLE),
    ("习近平法治思想之单选题", QuestionType.SINGLE),
    ("判断题", QuestionType.JUDGE),
    ("是非题", QuestionType.JUDGE),
    ("习近平法治思想之判断题", QuestionType.JUDGE),
    ("不定项", QuestionType.INDEFINITE),
]


# ─── Question Starts ──────────────────────────────────────────────────────────

QUESTION_START_PATTERNS: list[LinePattern] = [
    # "1. 题目内容" / "1．题目内容"
    LinePattern("dotted", re.compile(r"^(\d+)[\.．]\s*(.*)$")),
    # "1、题目内容"
    LinePattern("enumeration_comma", re.compile(r"^(\d+)、\s*(.*)$")),
    # "第1题：题目内容"
    LinePattern("numbered_title", re.compile(r"^第?(\d+)题[：:]\s*(.*)$")),
    # "题目1：题目内容"
    LinePattern("titled", re.compile(r"^题目(\d+)[：:]\s*(.*)$")),
]


# ─── Options ──────────────────────────────────────────────────────────────────

OPTION_PATTERNS: list[LinePattern] = [
    LinePattern("dotted", re.compile(r"^([A-Z])[\.．]\s*(.+)$")),
    LinePattern("enumeration_comma", re.compile(r"^([A-Z])、\s*(.+)$")),
    LinePattern("spaced", re.compile(r"^([A-Z])\s+(.+)$")),
    LinePattern("fullwidth_parens", re.compile(r"^（([A-Z])）\s*(.+)$")),
    LinePattern("parens", re.compile(r"^\(([A-Z])\)\s*(.+)$")),
]


# ─── Answer Markers ───────────────────────────────────────────────────────────

ANSWER_MARKERS: tuple[str, ...] = ("正确答案", "答案", "标准答案", "参考答案")

ANSWER_MARKER_PATTERN = re.compile(
    r"^(?:%s)[：:](.*)$" % "|".join(re.escape(m) for m in ANSWER_MARKERS)
)


def detect_section_type(line: str) -> Optional[QuestionType]:
    """Return the question type announced by a section header line."""
    folded = line.casefold()
    for marker, question_type in SECTION_MARKERS:
        if marker.casefold() in folded:
            return question_type
    return None


def match_question_start(line: str) -> Optional[str]:
    """Return the question body if the line opens a new question."""
    for line_pattern in QUESTION_START_PATTERNS:
        match = line_pattern.pattern.match(line)
        if match:
            return match.group(2).strip()
    return None


def match_option(line: str) -> Optional[str]:
    """Return the option canonicalized as "<LABEL>.<text>"."""
    for line_pattern in OPTION_PATTERNS:
        match = line_pattern.pattern.match(line)
        if match:
            entry = OptionEntry(label=match.group(1), text=match.group(2).strip())
            return entry.render()
    return None


def match_answer_marker(line: str) -> Optional[str]:
    """Return the text after the answer marker's colon."""
    match = ANSWER_MARKER_PATTERN.match(line)
    if match:
        return match.group(1).strip()
    return None
