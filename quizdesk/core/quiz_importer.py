"""Utilities for importing quizzes from pasted, human-friendly text.

Text format (blank lines and ``Part N`` headers may appear anywhere):

    What is the capital of France?
    a) London
    b) Berlin
    c) Paris
    d) Madrid
    ✅ Correct Answer: c

Every line that is neither an option nor an answer marker starts a new
question. A question is kept only when it collected at least one option and
its marker resolved to one of those options; anything else is dropped without
raising, so a single malformed block never rejects the whole paste. Callers
decide whether an empty result is an error (``build_quiz_from_text`` does).

Architecture note:
    The format cannot express true/false or enumeration questions, so every
    parsed question is multiple-choice. Structured uploads go through
    ``quiz_validator`` instead, which knows about every question kind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
from pathlib import Path
import re
from uuid import uuid4

from quizdesk.constants.quiz_constants import (
    ANSWER_MARKER,
    DEFAULT_CREATED_BY,
    DEFAULT_PASTED_DESCRIPTION,
    DEFAULT_PASTED_TITLE,
    SECTION_HEADER_PREFIX,
)
from quizdesk.core.models import Question, QuestionKind, Quiz, SingleAnswer

logger = logging.getLogger(__name__)

_OPTION_LINE = re.compile(r"^[a-d]\)\s*(.+)$")


class QuizImportError(Exception):
    """Raised when pasted text does not yield a usable quiz."""


@dataclass(slots=True)
class _PendingQuestion:
    text: str
    line_number: int
    options: list[str] = field(default_factory=list)
    correct_answer: str | None = None


def parse_quiz_text(text: str) -> list[Question]:
    """Parse pasted quiz text into multiple-choice questions, dropping incomplete blocks."""
    questions: list[Question] = []
    pending = _PendingQuestion(text="", line_number=0)

    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith(SECTION_HEADER_PREFIX):
            continue

        option_match = _OPTION_LINE.match(line)
        if option_match:
            pending.options.append(option_match.group(1).strip())
            continue

        if line.startswith(ANSWER_MARKER):
            pending.correct_answer = _resolve_marker(line, pending.options, pending.correct_answer)
            continue

        _finalize(pending, questions)
        pending = _PendingQuestion(text=line, line_number=line_number)

    _finalize(pending, questions)
    return questions


def build_quiz_from_text(
    text: str,
    title: str | None = None,
    description: str | None = None,
    created_by: str = DEFAULT_CREATED_BY,
) -> Quiz:
    """Parse ``text`` into a new quiz, raising when no question survives parsing."""
    questions = parse_quiz_text(text)
    if not questions:
        raise QuizImportError(
            "No valid questions found. Each question needs at least one option "
            f"and a '{ANSWER_MARKER} <letter>' line."
        )
    return Quiz(
        id=str(uuid4()),
        title=(title or "").strip() or DEFAULT_PASTED_TITLE,
        description=(description or "").strip() or DEFAULT_PASTED_DESCRIPTION,
        created_at=datetime.now(timezone.utc),
        created_by=created_by,
        questions=questions,
    )


def load_quiz_from_file(file_path: Path, title: str | None = None) -> Quiz:
    text = file_path.read_text(encoding="utf-8")
    return build_quiz_from_text(text, title=title or file_path.stem)


def _resolve_marker(line: str, options: list[str], current: str | None) -> str | None:
    letter = line[len(ANSWER_MARKER):].strip()[:1].lower()
    if not letter:
        return current
    index = ord(letter) - ord("a")
    if 0 <= index < len(options):
        return options[index]
    return current


def _finalize(pending: _PendingQuestion, questions: list[Question]) -> None:
    if not pending.options or pending.correct_answer is None:
        if pending.text or pending.options:
            logger.debug(
                "Dropping incomplete question starting at line %d (%d option(s), answer %s)",
                pending.line_number,
                len(pending.options),
                "resolved" if pending.correct_answer is not None else "missing",
            )
        return
    questions.append(
        Question(
            id=f"q{len(questions) + 1}",
            text=pending.text,
            kind=QuestionKind.MULTIPLE_CHOICE,
            options=list(pending.options),
            answer_key=SingleAnswer(pending.correct_answer),
        )
    )
