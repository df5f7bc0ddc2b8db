"""D2Preprocessor — runs the scanner over every chapter of an mdBook book."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from mdbook_d2png.backend import Backend
from mdbook_d2png.config import PREPROCESSOR_NAME
from mdbook_d2png.events import parse_events, to_markdown
from mdbook_d2png.preprocessor.models import ChapterInfo
from mdbook_d2png.preprocessor.scanner import D2BlockScanner

logger = logging.getLogger(__name__)


def render_chapter(backend: Backend, chapter: ChapterInfo, content: str) -> str:
    """Return the chapter's Markdown with every d2 block replaced.

    A chapter without d2 blocks is returned untouched.
    """
    scanner = D2BlockScanner(backend, chapter)
    rendered = to_markdown(scanner.process(parse_events(content)))
    if scanner.diagram_index == 0:
        return content
    logger.info("%s: processed %d D2 diagram(s)", chapter.name, scanner.diagram_index)
    return rendered


def iter_chapters(book: dict) -> Iterator[dict]:
    """Yield every chapter dict of an mdBook book JSON, depth first."""
    # mdBook 0.4 calls the top-level list "sections", 0.5 calls it "items"
    items = book.get("sections", book.get("items", []))
    yield from _walk(items)


def _walk(items: list) -> Iterator[dict]:
    for item in items:
        if isinstance(item, dict) and "Chapter" in item:
            chapter = item["Chapter"]
            yield chapter
            yield from _walk(chapter.get("sub_items", []))


class D2Preprocessor:
    """mdBook preprocessor turning ```d2 blocks into PNG images."""

    name = PREPROCESSOR_NAME

    def run(self, context: dict, book: dict) -> dict:
        """Rewrite the content of every chapter in place and return the book."""
        backend = Backend.from_context(context)

        for chapter in iter_chapters(book):
            if chapter.get("source_path") is None:
                # Draft chapters have no file and no content
                continue
            info = ChapterInfo.model_validate(chapter)
            chapter["content"] = render_chapter(backend, info, chapter.get("content", ""))

        return book

    def supports_renderer(self, renderer: str) -> bool:
        # Output is plain Markdown, which every renderer accepts
        return True
