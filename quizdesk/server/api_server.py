"""FastAPI server exposing the admin and respondent endpoints."""

from __future__ import annotations

import hmac
import logging
from typing import Any

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Response
from fastapi.responses import HTMLResponse, PlainTextResponse
from pydantic import BaseModel, Field
import uvicorn

from quizdesk.config.settings import Settings
from quizdesk.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from quizdesk.constants.network_constants import ADMIN_KEY_HEADER
from quizdesk.constants.quiz_constants import DEFAULT_CREATED_BY
from quizdesk.core.markdown_renderer import renderer
from quizdesk.core.models import Quiz, QuizResult
from quizdesk.core.quiz_exporter import QuizExportError
from quizdesk.core.quiz_importer import QuizImportError
from quizdesk.core.quiz_manager import (
    DuplicateSubmissionError,
    QuizManager,
    QuizNotFoundError,
    RespondentStatus,
    ResultNotFoundError,
)
from quizdesk.core.quiz_validator import QuizValidationError
from quizdesk.core.result_exporter import ResultExportError
from quizdesk.core.serialization import question_to_dict, quiz_to_dict, result_to_dict
from quizdesk.core.services.quiz_store import StoreError
from quizdesk.server.pages import ADMIN_PAGE_HTML, RESPONDENT_PAGE_HTML

logger = logging.getLogger(__name__)


class ParsePayload(BaseModel):
    """Pasted quiz text from the admin page."""

    text: str
    title: str | None = None
    description: str | None = None


class UploadPayload(BaseModel):
    """Structured quiz file, optionally with title/description overrides."""

    quiz: Any
    title: str | None = None
    description: str | None = None


class SubmitPayload(BaseModel):
    """Answers in question order; ``None`` marks a skipped question."""

    respondent_name: str
    answers: list[str | None] = Field(default_factory=list)


class ApprovePayload(BaseModel):
    approved_by: str | None = None


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def _is_admin_key(settings: Settings, provided: str | None) -> bool:
    return bool(provided) and hmac.compare_digest(provided.encode("utf-8"), settings.admin_key.encode("utf-8"))


def _get_admin_dependency(settings: Settings):
    def dependency(x_admin_key: str | None = Header(default=None, alias=ADMIN_KEY_HEADER)) -> None:
        if not _is_admin_key(settings, x_admin_key):
            raise HTTPException(status_code=401, detail="Invalid or missing admin key")

    return dependency


def _public_quiz(quiz: Quiz) -> dict[str, object]:
    """Quiz as shown to respondents: rendered text, no answer keys."""
    questions = []
    for question in quiz.questions:
        data = question_to_dict(question, include_answer=False)
        data["text_html"] = renderer.render_fragment(question.text)
        data["options_html"] = [renderer.render_inline(option) for option in question.options]
        questions.append(data)
    return {
        "id": quiz.id,
        "title": quiz.title,
        "description": quiz.description,
        "question_count": len(quiz.questions),
        "questions": questions,
    }


def _quiz_summary(quiz: Quiz) -> dict[str, object]:
    return {
        "id": quiz.id,
        "title": quiz.title,
        "description": quiz.description,
        "question_count": len(quiz.questions),
        "created_at": quiz_to_dict(quiz)["created_at"],
    }


def _submission_receipt(result: QuizResult) -> dict[str, object]:
    return {
        "id": result.id,
        "quiz_id": result.quiz_id,
        "respondent_name": result.respondent_name,
        "submitted_at": result_to_dict(result)["submitted_at"],
        "status": RespondentStatus.PENDING.value,
        "message": "Quiz submitted successfully! Your results will be available after admin approval.",
    }


def _store_unavailable(exc: StoreError) -> HTTPException:
    logger.error("Store failure: %s", exc)
    return HTTPException(status_code=503, detail="Quiz storage is unavailable. Please try again later.")


def create_api_app(quiz_manager: QuizManager, settings: Settings) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} API", description=APP_ABOUT_TEXT, version=APP_VERSION)
    manager_dep = _get_quiz_manager_dependency(quiz_manager)
    require_admin = _get_admin_dependency(settings)

    @app.get("/", response_class=HTMLResponse)
    def serve_respondent_page() -> str:
        return RESPONDENT_PAGE_HTML

    @app.get("/admin", response_class=HTMLResponse)
    def serve_admin_page() -> str:
        return ADMIN_PAGE_HTML

    # --- Respondent endpoints ---

    @app.get("/api/quiz/list")
    def list_quizzes(manager: QuizManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            quizzes = manager.list_quizzes()
        except StoreError as exc:
            raise _store_unavailable(exc) from exc
        return {"quizzes": [_quiz_summary(quiz) for quiz in quizzes]}

    @app.get("/api/quiz/latest")
    def get_latest_quiz(manager: QuizManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            quiz = manager.get_latest_quiz()
        except StoreError as exc:
            raise _store_unavailable(exc) from exc
        if quiz is None:
            return {"quiz": None, "questions": []}
        public = _public_quiz(quiz)
        return {"quiz": public, "questions": public["questions"]}

    @app.get("/api/quiz/{quiz_id}")
    def get_quiz(quiz_id: str, manager: QuizManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            return _public_quiz(manager.get_quiz(quiz_id))
        except QuizNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except StoreError as exc:
            raise _store_unavailable(exc) from exc

    @app.post("/api/quiz/{quiz_id}/submit", status_code=201)
    def submit_quiz(
        quiz_id: str,
        payload: SubmitPayload,
        manager: QuizManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            result = manager.submit_answers(quiz_id, payload.respondent_name, payload.answers)
        except QuizNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except DuplicateSubmissionError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except StoreError as exc:
            raise _store_unavailable(exc) from exc
        return _submission_receipt(result)

    @app.get("/api/quiz/{quiz_id}/status")
    def get_respondent_status(
        quiz_id: str,
        name: str = Query(..., min_length=1),
        manager: QuizManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            result = manager.find_respondent_result(quiz_id, name)
        except StoreError as exc:
            raise _store_unavailable(exc) from exc
        if result is None:
            return {"status": RespondentStatus.NOT_TAKEN.value, "result": None}
        if not result.is_approved:
            return {"status": RespondentStatus.PENDING.value, "result": None}
        return {"status": RespondentStatus.COMPLETED.value, "result": result_to_dict(result)}

    @app.get("/api/results/{result_id}/download")
    def download_result(
        result_id: str,
        fmt: str = Query("csv", alias="format"),
        x_admin_key: str | None = Header(default=None, alias=ADMIN_KEY_HEADER),
        manager: QuizManager = Depends(manager_dep),
    ) -> Response:
        try:
            result = manager.get_result(result_id)
            if not result.is_approved and not _is_admin_key(settings, x_admin_key):
                raise HTTPException(status_code=403, detail="Result is awaiting admin approval.")
            document = manager.export_result(result_id, fmt)
        except ResultNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ResultExportError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except StoreError as exc:
            raise _store_unavailable(exc) from exc
        return Response(
            content=document.content,
            media_type=document.media_type,
            headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
        )

    # --- Admin endpoints ---

    @app.post("/api/admin/quiz/parse", status_code=201, dependencies=[Depends(require_admin)])
    def create_quiz_from_text(
        payload: ParsePayload,
        manager: QuizManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            quiz = manager.create_quiz_from_text(payload.text, payload.title, payload.description)
        except QuizImportError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except StoreError as exc:
            raise _store_unavailable(exc) from exc
        return {
            "quiz": quiz_to_dict(quiz),
            "message": f"Successfully saved quiz with {len(quiz.questions)} questions",
        }

    @app.post("/api/admin/quiz/upload", status_code=201, dependencies=[Depends(require_admin)])
    def upload_quiz(
        payload: UploadPayload,
        manager: QuizManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            quiz = manager.import_quiz(payload.quiz, payload.title, payload.description)
        except QuizValidationError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except StoreError as exc:
            raise _store_unavailable(exc) from exc
        return {
            "quiz": quiz_to_dict(quiz),
            "message": f"Successfully saved quiz with {len(quiz.questions)} questions",
        }

    @app.put("/api/admin/quiz/{quiz_id}", dependencies=[Depends(require_admin)])
    def replace_quiz(
        quiz_id: str,
        payload: UploadPayload,
        manager: QuizManager = Depends(manager_dep),
    ) -> dict[str, object]:
        quiz_payload = payload.quiz
        if isinstance(quiz_payload, dict):
            quiz_payload = {**quiz_payload}
            if payload.title:
                quiz_payload["title"] = payload.title
            if payload.description:
                quiz_payload["description"] = payload.description
        try:
            quiz = manager.replace_quiz(quiz_id, quiz_payload)
        except QuizNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except QuizValidationError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except StoreError as exc:
            raise _store_unavailable(exc) from exc
        return {"quiz": quiz_to_dict(quiz)}

    @app.get("/api/admin/quiz/{quiz_id}", dependencies=[Depends(require_admin)])
    def get_quiz_with_answers(quiz_id: str, manager: QuizManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            return {"quiz": quiz_to_dict(manager.get_quiz(quiz_id))}
        except QuizNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except StoreError as exc:
            raise _store_unavailable(exc) from exc

    @app.get(
        "/api/admin/quiz/{quiz_id}/export",
        response_class=PlainTextResponse,
        dependencies=[Depends(require_admin)],
    )
    def export_quiz_text(quiz_id: str, manager: QuizManager = Depends(manager_dep)) -> str:
        try:
            return manager.export_quiz_text(quiz_id)
        except QuizNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except QuizExportError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except StoreError as exc:
            raise _store_unavailable(exc) from exc

    @app.get("/api/admin/submissions", dependencies=[Depends(require_admin)])
    def list_submissions(manager: QuizManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            results = manager.list_submissions()
        except StoreError as exc:
            raise _store_unavailable(exc) from exc
        return {"submissions": [result_to_dict(result) for result in results]}

    @app.post("/api/admin/submissions/{result_id}/approve", dependencies=[Depends(require_admin)])
    def approve_submission(
        result_id: str,
        payload: ApprovePayload | None = None,
        manager: QuizManager = Depends(manager_dep),
    ) -> dict[str, object]:
        approved_by = payload.approved_by if payload and payload.approved_by else DEFAULT_CREATED_BY
        try:
            result = manager.approve_submission(result_id, approved_by)
        except ResultNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except StoreError as exc:
            raise _store_unavailable(exc) from exc
        return {"submission": result_to_dict(result)}

    return app


def run_api_server(quiz_manager: QuizManager, settings: Settings) -> None:
    """Serve the API with uvicorn until the process is stopped."""
    app = create_api_app(quiz_manager, settings)
    config = uvicorn.Config(app=app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    server = uvicorn.Server(config)
    server.run()
