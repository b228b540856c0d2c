"""Downloadable renderings of a graded result (CSV, plain text, XLSX).

Every format lists one row per question followed by the aggregate score line.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
import io
import re
from typing import Any

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font

from quizdesk.core.grader import format_percentage
from quizdesk.core.models import QuizResult

_DETAIL_HEADERS = ["Question", "Your Answer", "Correct Answer", "Result"]
_FILENAME_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")
_FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r")


@dataclass(frozen=True, slots=True)
class ExportedDocument:
    """Rendered export ready to be streamed to a client."""

    content: bytes
    media_type: str
    filename: str


class ResultExportError(ValueError):
    """Raised for export formats that are not supported."""


def export_result(result: QuizResult, fmt: str) -> ExportedDocument:
    fmt = fmt.lower()
    if fmt == "csv":
        return ExportedDocument(export_result_csv(result), "text/csv; charset=utf-8", _filename(result, "csv"))
    if fmt == "txt":
        return ExportedDocument(export_result_text(result), "text/plain; charset=utf-8", _filename(result, "txt"))
    if fmt == "xlsx":
        return ExportedDocument(
            export_result_xlsx(result),
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            _filename(result, "xlsx"),
        )
    raise ResultExportError(f"Invalid format '{fmt}'. Use csv, txt or xlsx.")


def export_result_csv(result: QuizResult) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(_DETAIL_HEADERS)
    writer.writerows([_csv_text(value) for value in row] for row in _detail_rows(result))
    writer.writerow([])
    writer.writerow(_score_row(result))
    return buffer.getvalue().encode("utf-8")


def export_result_text(result: QuizResult) -> bytes:
    lines = [
        f"Quiz Results for {result.respondent_name}",
        "",
        f"Quiz: {result.quiz_title or 'Unknown Quiz'}",
        f"Date: {result.submitted_at.date().isoformat()}",
        f"Score: {result.score}/{result.total_questions} ({format_percentage(result.percentage)})",
        "",
        "Detailed Results:",
        "=" * 50,
        "",
    ]
    for position, detail in enumerate(result.detailed_answers, start=1):
        lines.append(f"Question {position}: {detail.question_text}")
        lines.append(f"Your Answer: {detail.respondent_answer}")
        lines.append(f"Correct Answer: {detail.correct_answer.display()}")
        lines.append(f"Result: {'Correct' if detail.is_correct else 'Incorrect'}")
        lines.append("")
    return "\n".join(lines).encode("utf-8")


def export_result_xlsx(result: QuizResult) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "result"
    _append_text_row(sheet, ["Respondent", result.respondent_name])
    _append_text_row(sheet, ["Quiz", result.quiz_title])
    sheet.append(["Submitted", result.submitted_at.isoformat()])
    sheet.append([])
    sheet.append(_DETAIL_HEADERS)
    for cell in sheet[sheet.max_row]:
        cell.font = Font(bold=True)
    for row in _detail_rows(result):
        _append_text_row(sheet, row)
    sheet.append([])
    sheet.append(_score_row(result))

    stream = io.BytesIO()
    workbook.save(stream)
    return stream.getvalue()


def _detail_rows(result: QuizResult) -> list[list[str]]:
    return [
        [
            detail.question_text,
            detail.respondent_answer,
            detail.correct_answer.display(),
            "Correct" if detail.is_correct else "Incorrect",
        ]
        for detail in result.detailed_answers
    ]


def _append_text_row(sheet: Any, values: list[str]) -> None:
    # Worksheet cells reject ASCII control characters.
    sheet.append([ILLEGAL_CHARACTERS_RE.sub("", value) for value in values])
    for cell in sheet[sheet.max_row]:
        if cell.data_type == "f":
            cell.data_type = "s"


def _csv_text(value: str) -> str:
    # Spreadsheet apps evaluate cells starting with these characters.
    if value.startswith(_FORMULA_PREFIXES):
        return f"'{value}"
    return value


def _score_row(result: QuizResult) -> list[str]:
    return [
        "Total Score",
        str(result.score),
        str(result.total_questions),
        format_percentage(result.percentage),
    ]


def _filename(result: QuizResult, extension: str) -> str:
    safe_name = _FILENAME_UNSAFE.sub("-", result.respondent_name).strip("-") or "respondent"
    return f"quiz-results-{safe_name}.{extension}"
