"""Application entry point for QuizDesk."""

from __future__ import annotations

from quizdesk.config.settings import load_settings
from quizdesk.core.quiz_manager import QuizManager
from quizdesk.core.services.quiz_store import create_store
from quizdesk.server.api_server import run_api_server
from quizdesk.utils.logging_config import configure_logging


def main() -> None:
    """Load settings, build the configured store and serve the web app."""
    settings = load_settings()
    logger = configure_logging(settings.log_level)
    logger.info("Starting QuizDesk…")

    store = create_store(settings.store_backend, settings.resolved_store_path())
    quiz_manager = QuizManager(store)
    logger.info("Respondent page at http://%s:%d/ (admin at /admin)", settings.host, settings.port)
    run_api_server(quiz_manager, settings)


if __name__ == "__main__":
    main()
