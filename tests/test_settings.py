from __future__ import annotations

import logging
from pathlib import Path

import pytest

from quizdesk.config.settings import Settings
from quizdesk.core.markdown_renderer import QuestionRenderer
from quizdesk.utils.logging_config import configure_logging


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("QUIZDESK_STORE_BACKEND", "xlsx")
    monkeypatch.setenv("QUIZDESK_STORE_PATH", str(tmp_path / "quiz.xlsx"))
    monkeypatch.setenv("QUIZDESK_ADMIN_KEY", "from-env")

    settings = Settings()

    assert settings.store_backend == "xlsx"
    assert settings.resolved_store_path() == tmp_path / "quiz.xlsx"
    assert settings.admin_key == "from-env"


def test_default_store_paths() -> None:
    assert Settings(store_backend="memory").resolved_store_path() is None
    assert Settings(store_backend="json").resolved_store_path() == Path("data/quizdesk.json")
    assert Settings(store_backend="xlsx").resolved_store_path() == Path("data/quizdesk.xlsx")


def test_configure_logging_returns_package_logger() -> None:
    logger = configure_logging("debug")

    assert logger.name == "quizdesk"
    assert isinstance(logger, logging.Logger)


def test_renderer_escapes_raw_html_and_keeps_math() -> None:
    renderer = QuestionRenderer()

    html = renderer.render_fragment("Solve $x^2 = 4$ <script>alert(1)</script>")

    assert "$x^2 = 4$" in html
    assert "<script>" not in html
    assert renderer.render_fragment("   ") == "<p><em>No content provided.</em></p>"
    assert renderer.render_inline("**bold**") == "<strong>bold</strong>"


def test_renderer_escapes_raw_html_in_option_labels() -> None:
    assert QuestionRenderer().render_inline("<b>x</b> & y") == "&lt;b&gt;x&lt;/b&gt; &amp; y"
