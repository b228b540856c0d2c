"""Quiz-related constants shared across the core and server layers."""

MIN_QUESTIONS_PER_QUIZ: int = 1
MAX_QUESTIONS_PER_QUIZ: int = 100
MIN_CHOICE_OPTIONS: int = 2

ANSWER_MARKER: str = "✅ Correct Answer:"
SECTION_HEADER_PREFIX: str = "Part "
OPTION_LETTERS: tuple[str, ...] = ("a", "b", "c", "d")

DEFAULT_CREATED_BY: str = "admin"
DEFAULT_PASTED_TITLE: str = "Pasted Quiz"
DEFAULT_PASTED_DESCRIPTION: str = "Quiz created from pasted text"
DEFAULT_UPLOADED_TITLE: str = "Uploaded Quiz"
DEFAULT_UPLOADED_DESCRIPTION: str = "Quiz uploaded from file"

PERCENTAGE_UNAVAILABLE: str = "N/A"
