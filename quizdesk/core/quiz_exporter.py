"""Utilities for exporting quizzes to the pasted-text format used for imports."""

from __future__ import annotations

from pathlib import Path

from quizdesk.constants.quiz_constants import ANSWER_MARKER, OPTION_LETTERS
from quizdesk.core.models import Question, QuestionKind, Quiz, SingleAnswer


class QuizExportError(Exception):
    """Raised when a quiz cannot be expressed in the pasted-text format."""


def save_quiz_to_file(file_path: Path, quiz: Quiz) -> None:
    """Persist the quiz to disk in the pasted-text format."""

    document = serialize_quiz_text(quiz)
    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(document, encoding="utf-8")


def serialize_quiz_text(quiz: Quiz) -> str:
    if not quiz.questions:
        raise QuizExportError("Cannot export an empty quiz.")
    blocks = [
        _serialize_question(position, question)
        for position, question in enumerate(quiz.questions, start=1)
    ]
    return "\n\n".join(blocks) + "\n"


def _serialize_question(position: int, question: Question) -> str:
    if question.kind is not QuestionKind.MULTIPLE_CHOICE or not isinstance(question.answer_key, SingleAnswer):
        raise QuizExportError(
            f"Question {position}: only multiple-choice questions can be exported as text."
        )
    if len(question.options) > len(OPTION_LETTERS):
        raise QuizExportError(
            f"Question {position}: at most {len(OPTION_LETTERS)} options can be exported as text."
        )
    if question.answer_key.value not in question.options:
        raise QuizExportError(f"Question {position}: correct answer is not one of the options.")

    # The parser treats every non-option line as a new question.
    lines = [" ".join(question.text.split())]
    for letter, option in zip(OPTION_LETTERS, question.options):
        lines.append(f"{letter}) {' '.join(option.split())}")
    correct_letter = OPTION_LETTERS[question.options.index(question.answer_key.value)]
    lines.append(f"{ANSWER_MARKER} {correct_letter}")
    return "\n".join(lines)
