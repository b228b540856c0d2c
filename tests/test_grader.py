from __future__ import annotations

from datetime import datetime, timezone

import pytest

from quizdesk.core.grader import (
    compute_percentage,
    format_percentage,
    grade_answers,
    grade_submission,
    is_answer_correct,
)
from quizdesk.core.models import MultiAnswer, Question, QuestionKind, Quiz, SingleAnswer
from quizdesk.core.quiz_importer import parse_quiz_text


def _enumeration(values: tuple[str, ...]) -> Question:
    return Question(
        id="e1",
        text="List them",
        kind=QuestionKind.ENUMERATION,
        options=[],
        answer_key=MultiAnswer(values),
    )


@pytest.mark.parametrize(
    ("answer", "expected"),
    [
        ("blue, red", True),
        ("RED ,Blue", True),
        ("red", False),
        ("red, blue, green", False),
        ("", False),
    ],
)
def test_enumeration_requires_exact_token_set(answer: str, expected: bool) -> None:
    question = _enumeration(("red", "blue"))

    assert is_answer_correct(question.answer_key, answer) is expected


def test_single_answer_is_case_insensitive() -> None:
    assert is_answer_correct(SingleAnswer("True"), "true")
    assert not is_answer_correct(SingleAnswer("True"), "False")


def test_end_to_end_capital_of_france(capital_text: str) -> None:
    questions = parse_quiz_text(capital_text)

    correct = grade_answers(questions, ["Paris"])
    wrong = grade_answers(questions, ["London"])

    assert (correct.score, correct.percentage) == (1, 100)
    assert (wrong.score, wrong.percentage) == (0, 0)


def test_missing_answers_are_incorrect_empty_strings(mixed_quiz: Quiz) -> None:
    outcome = grade_answers(mixed_quiz.questions, ["Paris", None])

    assert outcome.score == 1
    assert outcome.total_questions == 3
    assert [d.respondent_answer for d in outcome.detailed_answers] == ["Paris", "", ""]
    assert [d.is_correct for d in outcome.detailed_answers] == [True, False, False]


def test_details_follow_question_order_and_keep_answer_key(mixed_quiz: Quiz) -> None:
    outcome = grade_answers(mixed_quiz.questions, ["paris", "TRUE", "blue, red"])

    assert [d.question_id for d in outcome.detailed_answers] == ["q1", "q2", "q3"]
    assert outcome.detailed_answers[0].correct_answer == SingleAnswer("Paris")
    assert outcome.detailed_answers[2].correct_answer == MultiAnswer(("Red", "Blue"))
    assert outcome.detailed_answers[2].options == ("Red", "Blue", "Green")
    assert outcome.score == 3
    assert outcome.percentage == 100


def test_aggregate_is_consistent_with_details(mixed_quiz: Quiz) -> None:
    outcome = grade_answers(mixed_quiz.questions, ["Berlin", "True", "Red"])

    assert outcome.score == sum(d.is_correct for d in outcome.detailed_answers)
    assert (outcome.score, outcome.percentage) == (1, 33)


def test_zero_question_quiz_has_no_percentage() -> None:
    outcome = grade_answers([], ["anything"])

    assert outcome.total_questions == 0
    assert outcome.percentage is None
    assert format_percentage(outcome.percentage) == "N/A"


def test_compute_percentage_rounds() -> None:
    assert compute_percentage(2, 3) == 67
    assert compute_percentage(1, 3) == 33
    assert format_percentage(67) == "67%"


def test_compute_percentage_rounds_halves_up() -> None:
    assert compute_percentage(1, 8) == 13
    assert compute_percentage(5, 8) == 63
    assert compute_percentage(3, 8) == 38
    assert compute_percentage(8, 8) == 100
    assert compute_percentage(0, 8) == 0


def test_enumeration_key_given_as_one_string_is_split() -> None:
    key = MultiAnswer(("red, blue",))

    assert is_answer_correct(key, "blue, red")
    assert is_answer_correct(key, " RED,Blue ")
    assert not is_answer_correct(key, "red")


def test_grade_submission_snapshots_quiz(mixed_quiz: Quiz) -> None:
    before = datetime.now(timezone.utc)

    result = grade_submission(mixed_quiz, "Ada", ["Paris"])

    assert result.quiz_id == "quiz-1"
    assert result.quiz_title == "Mixed"
    assert result.quiz_description == "One of each kind"
    assert result.respondent_name == "Ada"
    assert result.raw_answers == ["Paris", "", ""]
    assert result.score == 1
    assert result.total_questions == 3
    assert result.percentage == 33
    assert result.submitted_at >= before
    assert not result.is_approved
