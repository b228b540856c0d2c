"""Domain models for the quiz desk."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

TRUE_FALSE_OPTIONS: tuple[str, str] = ("True", "False")


class QuestionKind(str, Enum):
    """Closed set of question kinds understood by the grader."""

    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"
    ENUMERATION = "enumeration"


@dataclass(frozen=True, slots=True)
class SingleAnswer:
    """Answer key for multiple-choice and true/false questions."""

    value: str

    def display(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class MultiAnswer:
    """Answer key for enumeration questions.

    Membership is unordered and case-insensitive when graded; the authored order
    is kept so results read the way the quiz author wrote them.
    """

    values: tuple[str, ...]

    def display(self) -> str:
        return ", ".join(self.values)


AnswerKey = SingleAnswer | MultiAnswer


@dataclass(slots=True)
class Question:
    """A single quiz question together with its answer key."""

    id: str
    text: str
    kind: QuestionKind
    options: list[str]
    answer_key: AnswerKey


@dataclass(slots=True)
class Quiz:
    """Ordered collection of questions; order defines presentation and grading."""

    id: str
    title: str
    description: str
    created_at: datetime
    created_by: str
    questions: list[Question] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class DetailedAnswer:
    """Per-question grading outcome captured at submission time."""

    question_id: str
    question_text: str
    respondent_answer: str
    correct_answer: AnswerKey
    is_correct: bool
    options: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Approval:
    """Admin sign-off that releases a result to its respondent."""

    approved_at: datetime
    approved_by: str


@dataclass(slots=True)
class QuizResult:
    """Graded submission. Quiz title/description are copied, not referenced."""

    id: str
    quiz_id: str
    quiz_title: str
    quiz_description: str
    respondent_name: str
    raw_answers: list[str]
    detailed_answers: list[DetailedAnswer]
    score: int
    total_questions: int
    percentage: int | None
    submitted_at: datetime
    approval: Approval | None = None

    @property
    def is_approved(self) -> bool:
        return self.approval is not None
