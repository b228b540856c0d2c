"""Business logic shared by the admin and respondent sides of the API."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timezone
from enum import Enum
import logging
from threading import Lock
from typing import Any

from quizdesk.constants.quiz_constants import DEFAULT_CREATED_BY
from quizdesk.core.grader import grade_submission
from quizdesk.core.models import Approval, Quiz, QuizResult
from quizdesk.core.quiz_exporter import serialize_quiz_text
from quizdesk.core.quiz_importer import build_quiz_from_text
from quizdesk.core.quiz_validator import build_quiz_from_payload
from quizdesk.core.result_exporter import ExportedDocument, export_result
from quizdesk.core.services.quiz_store import QuizStore

logger = logging.getLogger(__name__)


class QuizNotFoundError(LookupError):
    """Raised when a quiz id does not exist in the store."""


class ResultNotFoundError(LookupError):
    """Raised when a result id does not exist in the store."""


class DuplicateSubmissionError(RuntimeError):
    """Raised when a respondent submits the same quiz twice."""


class RespondentStatus(str, Enum):
    NOT_TAKEN = "not_taken"
    PENDING = "pending"
    COMPLETED = "completed"


class QuizManager:
    """Facade over the quiz store: authoring, submissions and approvals."""

    def __init__(self, store: QuizStore) -> None:
        self._store = store
        self._lock = Lock()

    # --- Authoring ---

    def create_quiz_from_text(
        self,
        text: str,
        title: str | None = None,
        description: str | None = None,
        created_by: str = DEFAULT_CREATED_BY,
    ) -> Quiz:
        quiz = build_quiz_from_text(text, title=title, description=description, created_by=created_by)
        self._store.append(quiz)
        logger.info("Saved pasted quiz %s with %d question(s)", quiz.id, len(quiz.questions))
        return quiz

    def import_quiz(
        self,
        payload: Any,
        title: str | None = None,
        description: str | None = None,
        created_by: str = DEFAULT_CREATED_BY,
    ) -> Quiz:
        quiz = build_quiz_from_payload(payload, title=title, description=description, created_by=created_by)
        self._store.append(quiz)
        logger.info("Saved uploaded quiz %s with %d question(s)", quiz.id, len(quiz.questions))
        return quiz

    def replace_quiz(self, quiz_id: str, payload: Any) -> Quiz:
        """Replace title, description and questions of an existing quiz, keeping its identity."""
        with self._lock:
            existing = self._require_quiz(quiz_id)
            rebuilt = build_quiz_from_payload(payload)
            updated = replace(
                existing,
                title=rebuilt.title if _has_text(payload, "title") else existing.title,
                description=rebuilt.description if _has_text(payload, "description") else existing.description,
                questions=rebuilt.questions,
            )
            self._store.replace(updated)
        logger.info("Replaced quiz %s (%d question(s))", quiz_id, len(updated.questions))
        return updated

    def list_quizzes(self) -> list[Quiz]:
        return self._store.list_all()

    def get_quiz(self, quiz_id: str) -> Quiz:
        return self._require_quiz(quiz_id)

    def get_latest_quiz(self) -> Quiz | None:
        quizzes = self._store.list_all()
        return quizzes[-1] if quizzes else None

    def export_quiz_text(self, quiz_id: str) -> str:
        return serialize_quiz_text(self._require_quiz(quiz_id))

    # --- Submissions ---

    def submit_answers(
        self,
        quiz_id: str,
        respondent_name: str,
        answers: Sequence[str | None],
    ) -> QuizResult:
        name = respondent_name.strip()
        if not name:
            raise ValueError("Respondent name is required.")
        with self._lock:
            quiz = self._require_quiz(quiz_id)
            if self._find_respondent_result(quiz_id, name) is not None:
                raise DuplicateSubmissionError(f"'{name}' has already submitted this quiz.")
            result = grade_submission(quiz, name, answers)
            self._store.append_result(result)
        logger.info(
            "Recorded submission %s for quiz %s: %d/%d",
            result.id,
            quiz_id,
            result.score,
            result.total_questions,
        )
        return result

    def list_submissions(self) -> list[QuizResult]:
        """Return every result, newest submission first."""
        return sorted(self._store.list_all_results(), key=lambda r: r.submitted_at, reverse=True)

    def get_result(self, result_id: str) -> QuizResult:
        result = self._store.find_result(result_id)
        if result is None:
            raise ResultNotFoundError(f"Result '{result_id}' not found.")
        return result

    def approve_submission(self, result_id: str, approved_by: str = DEFAULT_CREATED_BY) -> QuizResult:
        """Approve a result. Approving twice keeps the first approval."""
        with self._lock:
            result = self.get_result(result_id)
            if result.is_approved:
                return result
            approved = replace(
                result,
                approval=Approval(
                    approved_at=datetime.now(timezone.utc),
                    approved_by=approved_by.strip() or DEFAULT_CREATED_BY,
                ),
            )
            self._store.replace_result(approved)
        logger.info("Approved result %s by %s", result_id, approved.approval.approved_by)
        return approved

    def get_respondent_status(self, quiz_id: str, respondent_name: str) -> RespondentStatus:
        result = self.find_respondent_result(quiz_id, respondent_name)
        if result is None:
            return RespondentStatus.NOT_TAKEN
        return RespondentStatus.COMPLETED if result.is_approved else RespondentStatus.PENDING

    def find_respondent_result(self, quiz_id: str, respondent_name: str) -> QuizResult | None:
        return self._find_respondent_result(quiz_id, respondent_name.strip())

    def export_result(self, result_id: str, fmt: str) -> ExportedDocument:
        return export_result(self.get_result(result_id), fmt)

    # --- Helpers ---

    def _require_quiz(self, quiz_id: str) -> Quiz:
        quiz = self._store.find_by_id(quiz_id)
        if quiz is None:
            raise QuizNotFoundError(f"Quiz '{quiz_id}' not found.")
        return quiz

    def _find_respondent_result(self, quiz_id: str, name: str) -> QuizResult | None:
        if not name:
            return None
        wanted = name.casefold()
        return next(
            (
                result
                for result in self._store.list_all_results()
                if result.quiz_id == quiz_id and result.respondent_name.casefold() == wanted
            ),
            None,
        )


def _has_text(payload: Any, key: str) -> bool:
    value = payload.get(key) if isinstance(payload, dict) else None
    return isinstance(value, str) and bool(value.strip())
