from __future__ import annotations

import re

import pytest

from quizdesk.core.grader import is_answer_correct
from quizdesk.core.models import MultiAnswer, QuestionKind, SingleAnswer
from quizdesk.core.quiz_validator import QuizValidationError, build_quiz_from_payload


def test_builds_quiz_for_every_kind(upload_payload: dict) -> None:
    quiz = build_quiz_from_payload(upload_payload)

    assert quiz.title == "Uploaded"
    assert [q.kind for q in quiz.questions] == [
        QuestionKind.MULTIPLE_CHOICE,
        QuestionKind.TRUE_FALSE,
        QuestionKind.ENUMERATION,
    ]
    assert quiz.questions[0].answer_key == SingleAnswer("B")
    assert quiz.questions[1].options == ["True", "False"]
    assert quiz.questions[1].answer_key == SingleAnswer("True")
    assert quiz.questions[2].answer_key == MultiAnswer(("Red", "Blue", "Yellow"))


def test_overrides_and_defaults_for_title(upload_payload: dict) -> None:
    overridden = build_quiz_from_payload(upload_payload, title="Override")
    upload_payload.pop("title")
    upload_payload.pop("description")
    defaulted = build_quiz_from_payload(upload_payload)

    assert overridden.title == "Override"
    assert defaulted.title == "Uploaded Quiz"
    assert defaulted.description == "Quiz uploaded from file"


def test_enumeration_without_options_accepts_free_text_answers() -> None:
    quiz = build_quiz_from_payload(
        {"questions": [{"question": "Name two", "type": "enumeration", "correctAnswer": "cat"}]}
    )

    assert quiz.questions[0].options == []
    assert quiz.questions[0].answer_key == MultiAnswer(("cat",))


def test_enumeration_string_answer_is_split_on_commas() -> None:
    free_text = build_quiz_from_payload(
        {"questions": [{"question": "Colours?", "type": "enumeration", "correctAnswer": "red, blue,"}]}
    )
    with_options = build_quiz_from_payload(
        {
            "questions": [
                {
                    "question": "Colours?",
                    "type": "enumeration",
                    "options": ["Red", "Blue", "Green"],
                    "correctAnswer": "Red, Blue",
                }
            ]
        }
    )

    assert free_text.questions[0].answer_key == MultiAnswer(("red", "blue"))
    assert is_answer_correct(free_text.questions[0].answer_key, "blue, red")
    assert with_options.questions[0].answer_key == MultiAnswer(("Red", "Blue"))


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ([], "expected a JSON object"),
        ({}, "questions array is required"),
        ({"questions": []}, "between 1 and 100 questions"),
        ({"questions": [{"question": "x"}] * 101}, "between 1 and 100 questions"),
        ({"questions": [{"type": "true-false"}]}, "Question 1: Missing question text or type"),
        (
            {"questions": [{"question": "x", "type": "essay"}]},
            "Question 1: Invalid question type",
        ),
        (
            {"questions": [{"question": "x", "type": "multiple-choice", "options": ["a"], "correctAnswer": "a"}]},
            "Question 1: Multiple choice questions must have at least 2 options",
        ),
        (
            {"questions": [{"question": "x", "type": "multiple-choice", "options": ["a", "b"], "correctAnswer": "c"}]},
            "Question 1: Correct answer must be one of the provided options",
        ),
        (
            {"questions": [{"question": "x", "type": "true-false", "correctAnswer": "maybe"}]},
            "Question 1: True/False questions must have 'True' or 'False'",
        ),
        (
            {"questions": [{"question": "x", "type": "enumeration", "options": ["a", "b"], "correctAnswer": []}]},
            "Question 1: At least one correct answer is required",
        ),
        (
            {"questions": [{"question": "x", "type": "enumeration", "options": ["a", "b"], "correctAnswer": ["a", "z"]}]},
            "Question 1: Correct answer 'z' not found in options",
        ),
    ],
)
def test_reports_field_specific_errors(payload: object, message: str) -> None:
    with pytest.raises(QuizValidationError, match=re.escape(message)):
        build_quiz_from_payload(payload)


def test_error_names_the_offending_question(upload_payload: dict) -> None:
    upload_payload["questions"][2]["correctAnswer"] = ["Purple"]

    with pytest.raises(QuizValidationError, match="Question 3"):
        build_quiz_from_payload(upload_payload)
