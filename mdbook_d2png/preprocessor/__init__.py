"""Preprocessor — scans chapters for d2 blocks and splices in rendered images."""

from mdbook_d2png.preprocessor.book import D2Preprocessor, iter_chapters, render_chapter
from mdbook_d2png.preprocessor.models import ChapterInfo
from mdbook_d2png.preprocessor.scanner import (
    D2_CODE_BLOCK_LANG,
    D2BlockScanner,
    DiagramBlock,
    ScanState,
    is_d2_block_start,
    process_events,
)
from mdbook_d2png.preprocessor.splicer import image_fragment

__all__ = [
    "ChapterInfo",
    "D2BlockScanner",
    "D2Preprocessor",
    "D2_CODE_BLOCK_LANG",
    "DiagramBlock",
    "ScanState",
    "image_fragment",
    "is_d2_block_start",
    "iter_chapters",
    "process_events",
    "render_chapter",
]
