"""Conversion between domain models and JSON-compatible dictionaries.

The same shapes are used by the file-backed stores and by the HTTP API, so a
stored record and an API response for it always agree.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from quizdesk.core.models import (
    AnswerKey,
    Approval,
    DetailedAnswer,
    MultiAnswer,
    Question,
    QuestionKind,
    Quiz,
    QuizResult,
    SingleAnswer,
)


def answer_key_to_json(answer_key: AnswerKey) -> str | list[str]:
    if isinstance(answer_key, MultiAnswer):
        return list(answer_key.values)
    return answer_key.value


def answer_key_from_json(kind: QuestionKind, raw: str | list[str]) -> AnswerKey:
    if kind is QuestionKind.ENUMERATION:
        values = [raw] if isinstance(raw, str) else list(raw)
        return MultiAnswer(tuple(values))
    if not isinstance(raw, str):
        raise ValueError(f"{kind.value} questions need a single answer, got {raw!r}")
    return SingleAnswer(raw)


def question_to_dict(question: Question, include_answer: bool = True) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": question.id,
        "text": question.text,
        "kind": question.kind.value,
        "options": list(question.options),
    }
    if include_answer:
        data["answer_key"] = answer_key_to_json(question.answer_key)
    return data


def question_from_dict(data: dict[str, Any]) -> Question:
    kind = QuestionKind(data["kind"])
    return Question(
        id=data["id"],
        text=data["text"],
        kind=kind,
        options=list(data.get("options") or []),
        answer_key=answer_key_from_json(kind, data["answer_key"]),
    )


def quiz_to_dict(quiz: Quiz, include_answers: bool = True) -> dict[str, Any]:
    return {
        "id": quiz.id,
        "title": quiz.title,
        "description": quiz.description,
        "created_at": _format_datetime(quiz.created_at),
        "created_by": quiz.created_by,
        "questions": [question_to_dict(q, include_answer=include_answers) for q in quiz.questions],
    }


def quiz_from_dict(data: dict[str, Any]) -> Quiz:
    return Quiz(
        id=data["id"],
        title=data["title"],
        description=data.get("description") or "",
        created_at=_parse_datetime(data["created_at"]),
        created_by=data.get("created_by") or "",
        questions=[question_from_dict(q) for q in data.get("questions") or []],
    )


def detailed_answer_to_dict(detail: DetailedAnswer) -> dict[str, Any]:
    return {
        "question_id": detail.question_id,
        "question_text": detail.question_text,
        "respondent_answer": detail.respondent_answer,
        "correct_answer": answer_key_to_json(detail.correct_answer),
        "is_correct": detail.is_correct,
        "options": list(detail.options),
    }


def detailed_answer_from_dict(data: dict[str, Any]) -> DetailedAnswer:
    raw_correct = data["correct_answer"]
    correct: AnswerKey
    if isinstance(raw_correct, list):
        correct = MultiAnswer(tuple(raw_correct))
    else:
        correct = SingleAnswer(raw_correct)
    return DetailedAnswer(
        question_id=data["question_id"],
        question_text=data["question_text"],
        respondent_answer=data["respondent_answer"],
        correct_answer=correct,
        is_correct=bool(data["is_correct"]),
        options=tuple(data.get("options") or ()),
    )


def result_to_dict(result: QuizResult) -> dict[str, Any]:
    return {
        "id": result.id,
        "quiz_id": result.quiz_id,
        "quiz_title": result.quiz_title,
        "quiz_description": result.quiz_description,
        "respondent_name": result.respondent_name,
        "raw_answers": list(result.raw_answers),
        "detailed_answers": [detailed_answer_to_dict(d) for d in result.detailed_answers],
        "score": result.score,
        "total_questions": result.total_questions,
        "percentage": result.percentage,
        "submitted_at": _format_datetime(result.submitted_at),
        "is_approved": result.is_approved,
        "approved_at": _format_datetime(result.approval.approved_at) if result.approval else None,
        "approved_by": result.approval.approved_by if result.approval else None,
    }


def result_from_dict(data: dict[str, Any]) -> QuizResult:
    approval = None
    if data.get("is_approved") and data.get("approved_at"):
        approval = Approval(
            approved_at=_parse_datetime(data["approved_at"]),
            approved_by=data.get("approved_by") or "",
        )
    return QuizResult(
        id=data["id"],
        quiz_id=data["quiz_id"],
        quiz_title=data.get("quiz_title") or "",
        quiz_description=data.get("quiz_description") or "",
        respondent_name=data["respondent_name"],
        raw_answers=list(data.get("raw_answers") or []),
        detailed_answers=[detailed_answer_from_dict(d) for d in data.get("detailed_answers") or []],
        score=int(data["score"]),
        total_questions=int(data["total_questions"]),
        percentage=data.get("percentage"),
        submitted_at=_parse_datetime(data["submitted_at"]),
        approval=approval,
    )


def _format_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _parse_datetime(raw: str) -> datetime:
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
