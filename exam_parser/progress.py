"""
Progress Emitter
================
Reports completion percentage and a status label to an optional host
callback at fixed milestones of a parse run.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, str], None]

# ─── Milestones ───────────────────────────────────────────────────────────────

ANALYZE_PERCENT = 5
SPLIT_PERCENT = 15
DETECT_PERCENT = 25
SCAN_SPAN = 50
VALIDATE_PERCENT = 80
COMPLETE_PERCENT = 100


class ProgressEmitter:
    """
    Wraps an optional progress callback.

    Percentages are clamped to 0-100 and never go backwards within one
    emitter. A failing callback is logged and otherwise ignored.
    """

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self.callback = callback
        self.last_percent = 0

    def emit(self, percent: int, message: str):
        percent = max(self.last_percent, min(COMPLETE_PERCENT, int(percent)))
        self.last_percent = percent

        if self.callback is None:
            return

        try:
            self.callback(percent, message)
        except Exception as e:
            logger.warning(f"Progress callback failed at {percent}%: {e}")

    def scan_progress(self, cursor: int, total: int, parsed: int):
        """Report block-scan progress proportionally to the line cursor."""
        ratio = cursor / total if total else 1
        self.emit(
            DETECT_PERCENT + int(ratio * SCAN_SPAN),
            f"Parsing question {parsed + 1}...",
        )
