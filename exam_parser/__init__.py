"""
Exam Text Parser
================
Converts loosely structured question-bank text into validated question
records.

Architecture:
    - Preprocessor: Normalizes line endings and whitespace into clean lines
    - Recognizers: Section headers, question starts, options, answer markers
    - Answer Normalizer: Turns answer encodings into option labels
    - Block Scanner: SEEK/COLLECT state machine assembling one block per question
    - Validator: Enforces record invariants and repairs judge questions
    - Progress Emitter: Milestone callbacks for host UIs

Version: 1.0.0
"""

__version__ = "1.0.0"
