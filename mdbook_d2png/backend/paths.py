"""Filenames and chapter-relative references for generated diagrams."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import PurePath, PurePosixPath

DIAGRAM_EXTENSION = ".png"


def format_section(section: Sequence[int] | None) -> str:
    """Render a section number the way mdBook displays it: [1, 2] -> "1.2."."""
    if not section:
        return ""
    return "".join(f"{n}." for n in section)


def diagram_filename(section: Sequence[int] | None, diagram_index: int) -> str:
    """Deterministic artifact name, e.g. "1.2.3.png" or "3.png" without a section."""
    return f"{format_section(section)}{diagram_index}{DIAGRAM_EXTENSION}"


def chapter_depth(chapter_path: str | PurePath | None) -> int:
    """Number of directories between the source root and the chapter file."""
    if chapter_path is None or str(chapter_path) == "":
        return 0
    return len(PurePath(chapter_path).parent.parts)


def relative_artifact_path(
    chapter_path: str | PurePath | None,
    output_dir: str | PurePath,
    filename: str,
) -> str:
    """Reference to output_dir/filename as seen from the chapter's directory.

    One ".." per nesting level, then the shared output directory. Always
    uses forward slashes since the result ends up in a Markdown link.
    """
    parts = [".."] * chapter_depth(chapter_path)
    parts.extend(PurePath(output_dir).parts)
    parts.append(filename)
    return str(PurePosixPath(*parts))
