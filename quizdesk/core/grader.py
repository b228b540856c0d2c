"""Scoring of submitted answers against a quiz's answer keys.

Grading is a pure function of the questions and the answers: nothing here
touches the store, so concurrent requests can grade without coordination.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import uuid4

from quizdesk.constants.quiz_constants import PERCENTAGE_UNAVAILABLE
from quizdesk.core.models import (
    AnswerKey,
    DetailedAnswer,
    MultiAnswer,
    Question,
    Quiz,
    QuizResult,
    SingleAnswer,
)


@dataclass(frozen=True, slots=True)
class GradeOutcome:
    """Aggregate score plus per-question details, in question order."""

    score: int
    total_questions: int
    percentage: int | None
    detailed_answers: list[DetailedAnswer]


def grade_answers(questions: Sequence[Question], answers: Sequence[str | None]) -> GradeOutcome:
    """Grade ``answers`` (aligned by index with ``questions``).

    Missing or ``None`` answers count as an empty, incorrect response.
    """
    score = 0
    details: list[DetailedAnswer] = []
    for index, question in enumerate(questions):
        respondent_answer = _answer_at(answers, index)
        is_correct = is_answer_correct(question.answer_key, respondent_answer)
        if is_correct:
            score += 1
        details.append(
            DetailedAnswer(
                question_id=question.id,
                question_text=question.text,
                respondent_answer=respondent_answer,
                correct_answer=question.answer_key,
                is_correct=is_correct,
                options=tuple(question.options),
            )
        )
    total = len(questions)
    return GradeOutcome(
        score=score,
        total_questions=total,
        percentage=compute_percentage(score, total),
        detailed_answers=details,
    )


def grade_submission(
    quiz: Quiz,
    respondent_name: str,
    answers: Sequence[str | None],
) -> QuizResult:
    """Grade a respondent's answers and wrap the outcome in an unapproved result."""
    outcome = grade_answers(quiz.questions, answers)
    return QuizResult(
        id=str(uuid4()),
        quiz_id=quiz.id,
        quiz_title=quiz.title,
        quiz_description=quiz.description,
        respondent_name=respondent_name,
        raw_answers=[_answer_at(answers, index) for index in range(len(quiz.questions))],
        detailed_answers=outcome.detailed_answers,
        score=outcome.score,
        total_questions=outcome.total_questions,
        percentage=outcome.percentage,
        submitted_at=datetime.now(timezone.utc),
    )


def is_answer_correct(answer_key: AnswerKey, respondent_answer: str) -> bool:
    if isinstance(answer_key, MultiAnswer):
        return _answer_tokens(respondent_answer) == _answer_tokens(*answer_key.values)
    if isinstance(answer_key, SingleAnswer):
        return respondent_answer.casefold() == answer_key.value.casefold()
    raise TypeError(f"Unsupported answer key: {answer_key!r}")


def compute_percentage(score: int, total_questions: int) -> int | None:
    """Return the percentage rounded half up, or ``None`` for an empty quiz."""
    if total_questions <= 0:
        return None
    return (200 * score + total_questions) // (2 * total_questions)


def format_percentage(percentage: int | None) -> str:
    if percentage is None:
        return PERCENTAGE_UNAVAILABLE
    return f"{percentage}%"


def _answer_tokens(*answers: str) -> set[str]:
    return {token.strip().lower() for answer in answers for token in answer.split(",")}


def _answer_at(answers: Sequence[str | None], index: int) -> str:
    if index >= len(answers):
        return ""
    return answers[index] or ""
