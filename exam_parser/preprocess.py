"""
Preprocessor
============
Normalizes raw pasted or exported text into an ordered list of
non-empty, trimmed lines.
"""

from __future__ import annotations

import re

# Three or more consecutive newlines collapse to one blank separator
BLANK_RUN_PATTERN = re.compile(r"\n{3,}")

BYTE_ORDER_MARK = "\ufeff"


def normalize_text(text: str) -> str:
    """Unify line endings, trim every line and collapse blank-line runs."""
    text = text.lstrip(BYTE_ORDER_MARK)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    # str.strip() also removes the full-width space (U+3000)
    text = "\n".join(line.strip() for line in text.split("\n"))
    return BLANK_RUN_PATTERN.sub("\n\n", text)


def split_lines(text: str) -> list[str]:
    """Keep only the non-empty trimmed lines of normalized text."""
    return [line.strip() for line in text.split("\n") if line.strip()]


def preprocess(text: str) -> list[str]:
    """Split raw text into the lines the scanner consumes."""
    return split_lines(normalize_text(text))
