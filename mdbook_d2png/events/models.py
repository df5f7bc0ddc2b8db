"""Event stream types for a chapter's Markdown.

Block and inline elements open with Start and close with End; code block
bodies arrive as Text. Anything the preprocessor does not need to look
inside is a Raw chunk of source. Events produced by the parser keep the
exact source they came from so an untouched chapter re-serializes
unchanged; events built in code have source=None and are rendered from
their fields.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CodeBlock:
    """A fenced code block. info is the full info string after the fence."""

    info: str = ""
    indent: str = ""  # container prefix in front of the opening fence, e.g. "> "


@dataclass(frozen=True)
class Paragraph:
    indent: str = ""  # container prefix written before the paragraph's line


@dataclass(frozen=True)
class Image:
    dest_url: str
    title: str = ""


Tag = CodeBlock | Paragraph | Image


@dataclass(frozen=True)
class Start:
    tag: Tag
    source: str | None = None


@dataclass(frozen=True)
class End:
    tag: Tag
    source: str | None = None


@dataclass(frozen=True)
class Text:
    text: str
    source: str | None = None


@dataclass(frozen=True)
class Raw:
    source: str


Event = Start | End | Text | Raw
