from __future__ import annotations

from datetime import datetime, timezone

import pytest

from quizdesk.core.models import MultiAnswer, Question, QuestionKind, Quiz, SingleAnswer

CAPITAL_OF_FRANCE = """What is the capital of France?
a) London
b) Berlin
c) Paris
d) Madrid
✅ Correct Answer: c
"""


@pytest.fixture
def capital_text() -> str:
    return CAPITAL_OF_FRANCE


@pytest.fixture
def mixed_quiz() -> Quiz:
    return Quiz(
        id="quiz-1",
        title="Mixed",
        description="One of each kind",
        created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        created_by="admin",
        questions=[
            Question(
                id="q1",
                text="What is the capital of France?",
                kind=QuestionKind.MULTIPLE_CHOICE,
                options=["London", "Berlin", "Paris", "Madrid"],
                answer_key=SingleAnswer("Paris"),
            ),
            Question(
                id="q2",
                text="Water is wet",
                kind=QuestionKind.TRUE_FALSE,
                options=["True", "False"],
                answer_key=SingleAnswer("True"),
            ),
            Question(
                id="q3",
                text="Name two flag colours",
                kind=QuestionKind.ENUMERATION,
                options=["Red", "Blue", "Green"],
                answer_key=MultiAnswer(("Red", "Blue")),
            ),
        ],
    )


@pytest.fixture
def upload_payload() -> dict:
    return {
        "title": "Uploaded",
        "description": "From a file",
        "questions": [
            {
                "question": "Pick B",
                "type": "multiple-choice",
                "options": ["A", "B", "C", "D"],
                "correctAnswer": "B",
            },
            {"question": "The sky is blue", "type": "true-false", "correctAnswer": "true"},
            {
                "question": "Primary colours",
                "type": "enumeration",
                "options": ["Red", "Blue", "Yellow", "Green"],
                "correctAnswer": ["Red", "Blue", "Yellow"],
            },
        ],
    }
