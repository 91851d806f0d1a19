"""
Answer Normalizer
=================
Converts the text following an answer marker into an ordered list of
option labels.

Supported encodings:
    - Judge shorthand: "Y" → A, "N" → B
    - Contiguous letters: "ABCD"
    - Comma delimited: "A,B,C" / "A，B，C" / "A、B、C"
    - Space delimited: "A B C"
    - Mixed: "A，B C"
"""

from __future__ import annotations

import re

# A delimited list of single letters is tried before a bare letter run so
# that "A，B，C" is not cut short at "A".
ANSWER_TEXT_PATTERN = re.compile(
    r"^(?:[A-Z](?:(?:\s*[,，、]\s*|\s+)[A-Z](?![A-Z]))+|[A-Z]+)"
)

LETTER_RUN_PATTERN = re.compile(r"^[A-Z]+$")
COMMA_PATTERN = re.compile(r"[,，、]")
# Once a comma is present, whitespace between letters delimits too ("A，B C")
DELIMITED_SPLIT_PATTERN = re.compile(r"[,，、\s]+")
WHITESPACE_SPLIT_PATTERN = re.compile(r"\s+")

JUDGE_SHORTHAND = {"Y": ["A"], "N": ["B"]}

# Whole-word answers passed through for the judge validator to map
JUDGE_WORDS = frozenset({"正确", "对", "错误", "错", "TRUE", "FALSE"})


def extract_answer_text(text: str) -> str:
    """Capture the label-bearing prefix of an answer remainder."""
    stripped = text.strip()
    word = stripped.rstrip("。.").upper()
    if word in JUDGE_WORDS:
        return word

    match = ANSWER_TEXT_PATTERN.match(stripped)
    if not match:
        return ""
    return match.group(0).strip()


def split_answer_text(answer_text: str) -> list[str]:
    """Resolve captured answer text into labels, first rule wins."""
    if answer_text in JUDGE_WORDS:
        return [answer_text]

    if answer_text in JUDGE_SHORTHAND:
        return list(JUDGE_SHORTHAND[answer_text])

    if LETTER_RUN_PATTERN.match(answer_text):
        return list(answer_text)

    if COMMA_PATTERN.search(answer_text):
        return [p for p in DELIMITED_SPLIT_PATTERN.split(answer_text) if p]

    if WHITESPACE_SPLIT_PATTERN.search(answer_text):
        return [p for p in WHITESPACE_SPLIT_PATTERN.split(answer_text) if p]

    return [answer_text]


def normalize_answer(text: str) -> list[str]:
    """
    Normalize the remainder of an answer line into option labels.

    Args:
        text: Everything after the answer marker's colon.

    Returns:
        Labels in first-seen order without duplicates; empty when
        nothing recognizable follows the marker.
    """
    answer_text = extract_answer_text(text)
    if not answer_text:
        return []
    return list(dict.fromkeys(split_answer_text(answer_text)))
