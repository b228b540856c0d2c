"""Defaults for the persistence backends."""

STORE_BACKEND_MEMORY: str = "memory"
STORE_BACKEND_JSON: str = "json"
STORE_BACKEND_XLSX: str = "xlsx"
STORE_BACKENDS: tuple[str, ...] = (STORE_BACKEND_MEMORY, STORE_BACKEND_JSON, STORE_BACKEND_XLSX)

DEFAULT_JSON_STORE_PATH: str = "data/quizdesk.json"
DEFAULT_XLSX_STORE_PATH: str = "data/quizdesk.xlsx"

QUIZ_SHEET_TITLE: str = "quizzes"
RESULT_SHEET_TITLE: str = "results"
