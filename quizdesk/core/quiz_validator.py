"""Validation of structured (JSON) quiz files uploaded by admins.

Accepted shape::

    {
      "title": "...", "description": "...",
      "questions": [
        {"question": "...", "type": "multiple-choice",
         "options": ["..."], "correctAnswer": "..."},
        ...
      ]
    }

Every violation raises ``QuizValidationError`` naming the offending question,
so the admin page can show exactly what to fix. Validation finishes before a
``Quiz`` is built, which keeps partially valid uploads out of the store.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from quizdesk.constants.quiz_constants import (
    DEFAULT_CREATED_BY,
    DEFAULT_UPLOADED_DESCRIPTION,
    DEFAULT_UPLOADED_TITLE,
    MAX_QUESTIONS_PER_QUIZ,
    MIN_CHOICE_OPTIONS,
    MIN_QUESTIONS_PER_QUIZ,
)
from quizdesk.core.models import (
    TRUE_FALSE_OPTIONS,
    AnswerKey,
    MultiAnswer,
    Question,
    QuestionKind,
    Quiz,
    SingleAnswer,
)

_KIND_NAMES = ", ".join(f"'{kind.value}'" for kind in QuestionKind)


class QuizValidationError(ValueError):
    """Raised when an uploaded quiz does not match the expected structure."""


def build_quiz_from_payload(
    payload: Any,
    title: str | None = None,
    description: str | None = None,
    created_by: str = DEFAULT_CREATED_BY,
) -> Quiz:
    """Validate an uploaded quiz document and convert it into a new ``Quiz``."""
    if not isinstance(payload, dict):
        raise QuizValidationError("Invalid quiz structure: expected a JSON object.")
    questions = validate_questions(payload.get("questions"))
    return Quiz(
        id=str(uuid4()),
        title=_first_text(title, payload.get("title")) or DEFAULT_UPLOADED_TITLE,
        description=_first_text(description, payload.get("description")) or DEFAULT_UPLOADED_DESCRIPTION,
        created_at=datetime.now(timezone.utc),
        created_by=created_by,
        questions=questions,
    )


def validate_questions(raw_questions: Any) -> list[Question]:
    if not isinstance(raw_questions, list):
        raise QuizValidationError("Invalid quiz structure: questions array is required.")
    if not MIN_QUESTIONS_PER_QUIZ <= len(raw_questions) <= MAX_QUESTIONS_PER_QUIZ:
        raise QuizValidationError(
            f"Quiz must contain between {MIN_QUESTIONS_PER_QUIZ} and {MAX_QUESTIONS_PER_QUIZ} questions."
        )
    return [_validate_question(position, raw) for position, raw in enumerate(raw_questions, start=1)]


def _validate_question(position: int, raw: Any) -> Question:
    prefix = f"Question {position}"
    if not isinstance(raw, dict):
        raise QuizValidationError(f"{prefix}: expected an object.")

    text = raw.get("question")
    raw_kind = raw.get("type")
    if not isinstance(text, str) or not text.strip() or not raw_kind:
        raise QuizValidationError(f"{prefix}: Missing question text or type.")
    try:
        kind = QuestionKind(raw_kind)
    except ValueError as exc:
        raise QuizValidationError(
            f"{prefix}: Invalid question type. Must be {_KIND_NAMES}."
        ) from exc

    correct = raw.get("correctAnswer")
    if kind is QuestionKind.MULTIPLE_CHOICE:
        options = _validate_options(prefix, raw.get("options"), "Multiple choice")
        answer_key = _validate_single_choice(prefix, correct, options)
    elif kind is QuestionKind.TRUE_FALSE:
        options = list(TRUE_FALSE_OPTIONS)
        answer_key = _validate_true_false(prefix, correct)
    else:
        raw_options = raw.get("options")
        options = [] if not raw_options else _validate_options(prefix, raw_options, "Enumeration")
        answer_key = _validate_enumeration(prefix, correct, options)

    return Question(
        id=str(uuid4()),
        text=text.strip(),
        kind=kind,
        options=options,
        answer_key=answer_key,
    )


def _validate_options(prefix: str, raw_options: Any, label: str) -> list[str]:
    if not isinstance(raw_options, list) or len(raw_options) < MIN_CHOICE_OPTIONS:
        raise QuizValidationError(
            f"{prefix}: {label} questions must have at least {MIN_CHOICE_OPTIONS} options."
        )
    options: list[str] = []
    for option in raw_options:
        if not isinstance(option, str) or not option.strip():
            raise QuizValidationError(f"{prefix}: Option text cannot be empty.")
        options.append(option.strip())
    return options


def _validate_single_choice(prefix: str, correct: Any, options: list[str]) -> AnswerKey:
    if not isinstance(correct, str) or correct.strip() not in options:
        raise QuizValidationError(f"{prefix}: Correct answer must be one of the provided options.")
    return SingleAnswer(correct.strip())


def _validate_true_false(prefix: str, correct: Any) -> AnswerKey:
    if not isinstance(correct, str) or correct.strip().lower() not in ("true", "false"):
        raise QuizValidationError(
            f"{prefix}: True/False questions must have 'True' or 'False' as correct answer."
        )
    return SingleAnswer("True" if correct.strip().lower() == "true" else "False")


def _validate_enumeration(prefix: str, correct: Any, options: list[str]) -> AnswerKey:
    if isinstance(correct, str):
        values = [part for part in correct.split(",") if part.strip()]
    elif isinstance(correct, list):
        values = correct
    else:
        raise QuizValidationError(f"{prefix}: Correct answer must be a string or a list of strings.")
    if not values:
        raise QuizValidationError(f"{prefix}: At least one correct answer is required.")

    accepted: list[str] = []
    for value in values:
        if not isinstance(value, str) or not value.strip():
            raise QuizValidationError(f"{prefix}: Correct answers must be non-empty strings.")
        if options and value.strip() not in options:
            raise QuizValidationError(f"{prefix}: Correct answer '{value}' not found in options.")
        accepted.append(value.strip())
    return MultiAnswer(tuple(accepted))


def _first_text(*candidates: Any) -> str:
    for candidate in candidates:
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return ""
