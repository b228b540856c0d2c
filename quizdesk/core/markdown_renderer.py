"""Markdown rendering of question prompts for the respondent page.

Question text may contain Markdown and ``$...$`` math. The server turns the
Markdown into an HTML fragment; math is left untouched for MathJax to typeset
in the browser, so the stored text stays plain and editable.
"""

from __future__ import annotations

from markdown_it import MarkdownIt


class QuestionRenderer:
    """Converts question and option markdown into HTML fragments."""

    def __init__(self) -> None:
        # Question text comes from uploaded files, so raw HTML is always escaped.
        self._markdown = (
            MarkdownIt("commonmark", {"html": False})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        sanitized = markdown_text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def render_inline(self, markdown_text: str) -> str:
        """Render a single line (e.g. an option label) without a wrapping paragraph."""
        return self._markdown.renderInline(markdown_text.strip())


renderer = QuestionRenderer()
