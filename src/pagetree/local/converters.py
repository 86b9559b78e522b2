"""Conversion of page bodies into template source."""

from __future__ import annotations

from markdown_it import MarkdownIt


MARKDOWN_SUFFIXES = (".md", ".markdown")


class ContentConverter:
    """Translate page file bodies into HTML template source."""

    def __init__(self) -> None:
        self._markdown = MarkdownIt("commonmark", {"html": True})

    def markdown_to_html(self, markdown: str) -> str:
        return self._markdown.render(markdown)

    def to_template(self, body: str, suffix: str) -> str:
        if suffix.lower() in MARKDOWN_SUFFIXES:
            return self.markdown_to_html(body)
        return body
