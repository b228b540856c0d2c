from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from openpyxl import load_workbook
import pytest

from quizdesk.core.grader import grade_submission
from quizdesk.core.models import Approval, MultiAnswer, Quiz
from quizdesk.core.services.quiz_store import (
    InMemoryQuizStore,
    JsonFileQuizStore,
    StoreError,
    WorkbookQuizStore,
    create_store,
)


@pytest.fixture(params=["memory", "json", "xlsx"])
def store(request: pytest.FixtureRequest, tmp_path: Path):
    if request.param == "memory":
        return InMemoryQuizStore()
    if request.param == "json":
        return JsonFileQuizStore(tmp_path / "store.json")
    return WorkbookQuizStore(tmp_path / "store.xlsx")


def test_empty_store(store) -> None:
    assert store.list_all() == []
    assert store.list_all_results() == []
    assert store.find_by_id("missing") is None
    assert store.find_result("missing") is None


def test_append_and_find_quiz(store, mixed_quiz: Quiz) -> None:
    store.append(mixed_quiz)

    found = store.find_by_id("quiz-1")

    assert found is not None
    assert found.title == "Mixed"
    assert [q.id for q in found.questions] == ["q1", "q2", "q3"]
    assert found.questions[2].answer_key == MultiAnswer(("Red", "Blue"))
    assert found.created_at == mixed_quiz.created_at
    assert [q.id for q in store.list_all()] == ["quiz-1"]


def test_replace_quiz_by_id(store, mixed_quiz: Quiz) -> None:
    store.append(mixed_quiz)

    assert store.replace(replace(mixed_quiz, title="Renamed", questions=mixed_quiz.questions[:1]))
    assert not store.replace(replace(mixed_quiz, id="other"))

    found = store.find_by_id("quiz-1")
    assert found.title == "Renamed"
    assert len(found.questions) == 1


def test_results_round_trip_with_approval(store, mixed_quiz: Quiz) -> None:
    result = grade_submission(mixed_quiz, "Ada", ["Paris", "True", "red, blue"])
    store.append_result(result)

    approval = Approval(approved_at=datetime(2024, 6, 1, tzinfo=timezone.utc), approved_by="admin")
    assert store.replace_result(replace(result, approval=approval))

    stored = store.find_result(result.id)
    assert stored.is_approved
    assert stored.approval == approval
    assert stored.score == 3
    assert stored.percentage == 100
    assert stored.raw_answers == ["Paris", "True", "red, blue"]
    assert stored.detailed_answers == result.detailed_answers
    assert [r.id for r in store.list_all_results()] == [result.id]


@pytest.mark.parametrize("store_class, filename", [(JsonFileQuizStore, "s.json"), (WorkbookQuizStore, "s.xlsx")])
def test_file_stores_survive_reopening(store_class, filename: str, tmp_path: Path, mixed_quiz: Quiz) -> None:
    path = tmp_path / "nested" / filename
    store_class(path).append(mixed_quiz)

    reopened = store_class(path)

    assert path.exists()
    assert reopened.find_by_id("quiz-1").description == "One of each kind"


def test_corrupt_json_file_raises_store_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StoreError):
        JsonFileQuizStore(path).list_all()


def test_create_store_selects_backend(tmp_path: Path) -> None:
    assert isinstance(create_store("memory"), InMemoryQuizStore)
    assert isinstance(create_store("json", tmp_path / "a.json"), JsonFileQuizStore)
    assert isinstance(create_store("xlsx", tmp_path / "a.xlsx"), WorkbookQuizStore)
    with pytest.raises(ValueError):
        create_store("json")
    with pytest.raises(ValueError, match="expected one of: memory, json, xlsx"):
        create_store("sheets", tmp_path / "a")


def test_memory_stores_do_not_share_state(mixed_quiz: Quiz) -> None:
    first = InMemoryQuizStore()
    second = InMemoryQuizStore()

    first.append(mixed_quiz)

    assert second.list_all() == []


def test_failed_write_leaves_no_temp_file(tmp_path: Path, mixed_quiz: Quiz, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "store.json"
    store = JsonFileQuizStore(path)
    store.append(mixed_quiz)
    before = path.read_text(encoding="utf-8")

    def write_half_then_fail(self, snapshot, target: Path) -> None:
        target.write_text("{", encoding="utf-8")
        raise OSError("disk full")

    monkeypatch.setattr(JsonFileQuizStore, "_write_to", write_half_then_fail)

    with pytest.raises(StoreError, match="disk full"):
        store.append(replace(mixed_quiz, id="quiz-2"))
    assert sorted(p.name for p in tmp_path.iterdir()) == ["store.json"]
    assert path.read_text(encoding="utf-8") == before


def test_workbook_keeps_formula_like_text_as_text(tmp_path: Path, mixed_quiz: Quiz) -> None:
    path = tmp_path / "store.xlsx"
    store = WorkbookQuizStore(path)
    result = grade_submission(mixed_quiz, "=1+1", ["=SUM(A1:A2)"])
    store.append_result(result)

    sheet = load_workbook(path)["results"]
    name_cell = sheet.cell(row=2, column=5)

    assert name_cell.value == "=1+1"
    assert name_cell.data_type == "s"
    assert store.find_result(result.id).respondent_name == "=1+1"
    assert store.find_result(result.id).raw_answers[0] == "=SUM(A1:A2)"
