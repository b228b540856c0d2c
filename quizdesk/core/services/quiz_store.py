"""Persistence backends for quizzes and graded results.

Three interchangeable stores implement the ``QuizStore`` protocol:

* ``InMemoryQuizStore`` keeps records on the instance (lost on restart).
* ``JsonFileQuizStore`` keeps one JSON document on disk.
* ``WorkbookQuizStore`` keeps an ``.xlsx`` workbook with one sheet per record type.

The file-backed stores re-read their file for every operation and hold a lock
across each read-modify-write. That serialises writers inside one process
only; two processes sharing a file can still overwrite each other.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import json
import logging
import os
from pathlib import Path
from threading import Lock
from typing import Any, Protocol

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import IllegalCharacterError, InvalidFileException

from quizdesk.constants.store_constants import (
    QUIZ_SHEET_TITLE,
    RESULT_SHEET_TITLE,
    STORE_BACKEND_JSON,
    STORE_BACKEND_MEMORY,
    STORE_BACKEND_XLSX,
    STORE_BACKENDS,
)
from quizdesk.core.models import Quiz, QuizResult
from quizdesk.core.serialization import quiz_from_dict, quiz_to_dict, result_from_dict, result_to_dict

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when the backing medium cannot be read or written."""


class QuizStore(Protocol):
    """Operations the quiz manager needs from a persistence backend."""

    def append(self, quiz: Quiz) -> None: ...

    def list_all(self) -> list[Quiz]: ...

    def find_by_id(self, quiz_id: str) -> Quiz | None: ...

    def replace(self, quiz: Quiz) -> bool: ...

    def append_result(self, result: QuizResult) -> None: ...

    def list_all_results(self) -> list[QuizResult]: ...

    def find_result(self, result_id: str) -> QuizResult | None: ...

    def replace_result(self, result: QuizResult) -> bool: ...


class InMemoryQuizStore:
    """Keeps quizzes and results in lists owned by this instance."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._quizzes: list[Quiz] = []
        self._results: list[QuizResult] = []

    def append(self, quiz: Quiz) -> None:
        with self._lock:
            self._quizzes.append(quiz)

    def list_all(self) -> list[Quiz]:
        with self._lock:
            return list(self._quizzes)

    def find_by_id(self, quiz_id: str) -> Quiz | None:
        with self._lock:
            return next((q for q in self._quizzes if q.id == quiz_id), None)

    def replace(self, quiz: Quiz) -> bool:
        with self._lock:
            return _replace_by_id(self._quizzes, quiz)

    def append_result(self, result: QuizResult) -> None:
        with self._lock:
            self._results.append(result)

    def list_all_results(self) -> list[QuizResult]:
        with self._lock:
            return list(self._results)

    def find_result(self, result_id: str) -> QuizResult | None:
        with self._lock:
            return next((r for r in self._results if r.id == result_id), None)

    def replace_result(self, result: QuizResult) -> bool:
        with self._lock:
            return _replace_by_id(self._results, result)


@dataclass(slots=True)
class _Snapshot:
    quizzes: list[dict[str, Any]] = field(default_factory=list)
    results: list[dict[str, Any]] = field(default_factory=list)


class _FileQuizStore(ABC):
    """Shared read-modify-write logic for stores backed by a single file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = Lock()

    @property
    def path(self) -> Path:
        return self._path

    @abstractmethod
    def _read(self) -> _Snapshot:
        """Load the whole file; a missing file is an empty snapshot."""

    @abstractmethod
    def _write_to(self, snapshot: _Snapshot, target: Path) -> None:
        """Serialise ``snapshot`` into ``target``."""

    def append(self, quiz: Quiz) -> None:
        with self._lock:
            snapshot = self._read()
            snapshot.quizzes.append(quiz_to_dict(quiz))
            self._write(snapshot)

    def list_all(self) -> list[Quiz]:
        with self._lock:
            return [quiz_from_dict(item) for item in self._read().quizzes]

    def find_by_id(self, quiz_id: str) -> Quiz | None:
        with self._lock:
            item = next((q for q in self._read().quizzes if q["id"] == quiz_id), None)
        return quiz_from_dict(item) if item is not None else None

    def replace(self, quiz: Quiz) -> bool:
        with self._lock:
            snapshot = self._read()
            if not _replace_by_id(snapshot.quizzes, quiz_to_dict(quiz)):
                return False
            self._write(snapshot)
            return True

    def append_result(self, result: QuizResult) -> None:
        with self._lock:
            snapshot = self._read()
            snapshot.results.append(result_to_dict(result))
            self._write(snapshot)

    def list_all_results(self) -> list[QuizResult]:
        with self._lock:
            return [result_from_dict(item) for item in self._read().results]

    def find_result(self, result_id: str) -> QuizResult | None:
        with self._lock:
            item = next((r for r in self._read().results if r["id"] == result_id), None)
        return result_from_dict(item) if item is not None else None

    def replace_result(self, result: QuizResult) -> bool:
        with self._lock:
            snapshot = self._read()
            if not _replace_by_id(snapshot.results, result_to_dict(result)):
                return False
            self._write(snapshot)
            return True

    def _write(self, snapshot: _Snapshot) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._path.with_name(f".{self._path.name}.tmp")
        try:
            self._write_to(snapshot, temp_path)
            os.replace(temp_path, self._path)
        except OSError as exc:
            raise StoreError(f"Unable to write store file {self._path}: {exc}") from exc
        finally:
            temp_path.unlink(missing_ok=True)
        logger.debug(
            "Wrote %d quiz(zes) and %d result(s) to %s",
            len(snapshot.quizzes),
            len(snapshot.results),
            self._path,
        )


class JsonFileQuizStore(_FileQuizStore):
    """Stores everything in one JSON document: ``{"quizzes": [...], "results": [...]}``."""

    def _read(self) -> _Snapshot:
        if not self._path.exists():
            return _Snapshot()
        try:
            document = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StoreError(f"Unable to read store file {self._path}: {exc}") from exc
        if not isinstance(document, dict):
            raise StoreError(f"Store file {self._path} does not contain a JSON object.")
        return _Snapshot(
            quizzes=list(document.get("quizzes", [])),
            results=list(document.get("results", [])),
        )

    def _write_to(self, snapshot: _Snapshot, target: Path) -> None:
        document = {"quizzes": snapshot.quizzes, "results": snapshot.results}
        target.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")


_QUIZ_COLUMNS = ("id", "title", "description", "created_at", "created_by", "questions")
_RESULT_COLUMNS = (
    "id",
    "quiz_id",
    "quiz_title",
    "quiz_description",
    "respondent_name",
    "score",
    "total_questions",
    "percentage",
    "submitted_at",
    "is_approved",
    "approved_at",
    "approved_by",
    "raw_answers",
    "detailed_answers",
)
# Columns holding nested structures, stored as JSON text in a single cell.
_JSON_COLUMNS = frozenset({"questions", "raw_answers", "detailed_answers"})


class WorkbookQuizStore(_FileQuizStore):
    """Spreadsheet-backed store: one row per quiz or result, one sheet per record type."""

    def _read(self) -> _Snapshot:
        if not self._path.exists():
            return _Snapshot()
        try:
            workbook = load_workbook(self._path, read_only=True)
        except (OSError, InvalidFileException, KeyError, ValueError) as exc:
            raise StoreError(f"Unable to read workbook {self._path}: {exc}") from exc
        try:
            return _Snapshot(
                quizzes=_read_sheet(workbook, QUIZ_SHEET_TITLE),
                results=_read_sheet(workbook, RESULT_SHEET_TITLE),
            )
        finally:
            workbook.close()

    def _write_to(self, snapshot: _Snapshot, target: Path) -> None:
        workbook = Workbook()
        quiz_sheet = workbook.active
        quiz_sheet.title = QUIZ_SHEET_TITLE
        result_sheet = workbook.create_sheet(RESULT_SHEET_TITLE)
        try:
            _write_sheet(quiz_sheet, _QUIZ_COLUMNS, snapshot.quizzes)
            _write_sheet(result_sheet, _RESULT_COLUMNS, snapshot.results)
        except IllegalCharacterError as exc:
            raise StoreError(f"Workbook cells cannot hold control characters: {exc}") from exc
        workbook.save(target)


def _read_sheet(workbook: Any, title: str) -> list[dict[str, Any]]:
    if title not in workbook.sheetnames:
        return []
    rows = workbook[title].iter_rows(values_only=True)
    header = next(rows, None)
    if not header:
        return []
    records: list[dict[str, Any]] = []
    for row in rows:
        if not row or row[0] is None:
            continue
        record = dict(zip(header, row))
        for column in _JSON_COLUMNS.intersection(record):
            record[column] = json.loads(record[column]) if record[column] else []
        records.append(record)
    return records


def _write_sheet(sheet: Any, columns: tuple[str, ...], records: list[dict[str, Any]]) -> None:
    sheet.append(list(columns))
    for record in records:
        row = []
        for column in columns:
            value = record.get(column)
            if column in _JSON_COLUMNS:
                value = json.dumps(value if value is not None else [], ensure_ascii=False)
            row.append(value)
        sheet.append(row)
        for cell in sheet[sheet.max_row]:
            # Stored text such as "=1+1" must stay text, not become a formula.
            if cell.data_type == "f":
                cell.data_type = "s"


def _replace_by_id(items: list[Any], replacement: Any) -> bool:
    replacement_id = replacement["id"] if isinstance(replacement, dict) else replacement.id
    for index, item in enumerate(items):
        item_id = item["id"] if isinstance(item, dict) else item.id
        if item_id == replacement_id:
            items[index] = replacement
            return True
    return False


def create_store(backend: str, path: Path | None = None) -> QuizStore:
    """Build the store selected by configuration."""
    if backend == STORE_BACKEND_MEMORY:
        logger.info("Using in-memory quiz store")
        return InMemoryQuizStore()
    if path is None:
        raise ValueError(f"The '{backend}' store requires a file path.")
    if backend == STORE_BACKEND_JSON:
        logger.info("Using JSON quiz store at %s", path)
        return JsonFileQuizStore(path)
    if backend == STORE_BACKEND_XLSX:
        logger.info("Using workbook quiz store at %s", path)
        return WorkbookQuizStore(path)
    raise ValueError(f"Unknown store backend: {backend!r} (expected one of: {', '.join(STORE_BACKENDS)})")
