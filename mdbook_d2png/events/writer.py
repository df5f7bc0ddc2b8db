"""Serializes an event stream back to Markdown."""

from __future__ import annotations

import re
from collections.abc import Iterable

from mdbook_d2png.events.models import CodeBlock, End, Event, Image, Paragraph, Raw, Start, Text

_NOT_QUOTE_RE = re.compile(r"[^>\s]")


def to_markdown(events: Iterable[Event]) -> str:
    writer = MarkdownWriter()
    for event in events:
        writer.write(event)
    return writer.getvalue()


def _blank_line(indent: str) -> str:
    """An empty line that stays inside the same block quotes as indent."""
    return _NOT_QUOTE_RE.sub(" ", indent).rstrip()


def _is_blank(line: str) -> bool:
    return line.strip(" \t>") == ""


class MarkdownWriter:
    """Writes parsed events verbatim and built events from their fields.

    A paragraph built in code gets a blank line on either side so it
    never runs into the text around it.
    """

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._pending_blank: str | None = None

    def getvalue(self) -> str:
        return "".join(self._parts)

    def write(self, event: Event) -> None:
        if isinstance(event, Raw):
            self._write_source(event.source)
        elif event.source is not None:
            self._write_source(event.source)
        elif isinstance(event, Start):
            self._start(event.tag)
        elif isinstance(event, End):
            self._end(event.tag)
        elif isinstance(event, Text):
            self._parts.append(event.text)

    # -- source events -----------------------------------------------------

    def _write_source(self, source: str) -> None:
        if not source:
            return
        if self._pending_blank is not None:
            first_line = source.split("\n", 1)[0]
            if not _is_blank(first_line):
                self._parts.append(self._pending_blank + "\n")
            self._pending_blank = None
        self._parts.append(source)

    # -- built events ------------------------------------------------------

    def _start(self, tag) -> None:
        if isinstance(tag, Paragraph):
            self._pending_blank = None
            self._ensure_blank_line(_blank_line(tag.indent))
            self._parts.append(tag.indent)
        elif isinstance(tag, Image):
            self._parts.append("![")
        elif isinstance(tag, CodeBlock):
            self._parts.append(f"{tag.indent}```{tag.info}\n")

    def _end(self, tag) -> None:
        if isinstance(tag, Paragraph):
            self._parts.append("\n")
            self._pending_blank = _blank_line(tag.indent)
        elif isinstance(tag, Image):
            title = tag.title.replace('"', '\\"')
            suffix = f' "{title}"' if title else ""
            self._parts.append(f"]({_link_destination(tag.dest_url)}{suffix})")
        elif isinstance(tag, CodeBlock):
            self._parts.append(f"{tag.indent}```\n")

    def _ensure_blank_line(self, blank: str) -> None:
        text = self.getvalue()
        if not text:
            return
        if not text.endswith("\n"):
            self._parts.append("\n")
            text += "\n"
        previous = text[:-1].rsplit("\n", 1)[-1]
        if not _is_blank(previous):
            self._parts.append(blank + "\n")


def _link_destination(url: str) -> str:
    """Wrap destinations containing spaces or parentheses in angle brackets."""
    if any(c in url for c in " ()"):
        return f"<{url}>"
    return url
