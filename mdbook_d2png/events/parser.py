"""Turns Markdown into an event stream using markdown-it-py.

markdown-it-py finds the fenced code blocks (at any depth, inside block
quotes and list items too). Each fence is expanded into Start / Text /
End events; the source in between is passed along as Raw chunks.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from markdown_it import MarkdownIt
from markdown_it.token import Token

from mdbook_d2png.events.models import CodeBlock, End, Event, Raw, Start, Text

_NEWLINE_RE = re.compile(r"\r\n?")

_md = MarkdownIt("commonmark")


def normalize_newlines(text: str) -> str:
    return _NEWLINE_RE.sub("\n", text)


def split_lines(text: str) -> list[str]:
    """Split on "\\n" only, keeping line endings.

    str.splitlines also breaks on form feeds and unicode separators,
    which would put line numbers out of step with markdown-it's maps.
    """
    pieces = text.split("\n")
    lines = [piece + "\n" for piece in pieces[:-1]]
    if pieces[-1]:
        lines.append(pieces[-1])
    return lines


def parse_events(markdown: str) -> Iterator[Event]:
    """Yield the event stream for a chapter's Markdown."""
    text = normalize_newlines(markdown)
    lines = split_lines(text)
    cursor = 0

    for token in _md.parse(text):
        if token.type != "fence" or token.map is None:
            continue
        start, end = token.map
        if start > cursor:
            yield Raw("".join(lines[cursor:start]))
        yield from _fence_events(token, lines[start:end])
        cursor = end

    if cursor < len(lines):
        yield Raw("".join(lines[cursor:]))


def _fence_events(token: Token, lines: list[str]) -> Iterator[Event]:
    opening = lines[0]
    marker_at = opening.find(token.markup)
    indent = opening[:marker_at] if marker_at > 0 else ""
    tag = CodeBlock(info=token.info.strip(), indent=indent)

    body = split_lines(token.content)
    # A fence left open at the end of its container has no closing line
    count = min(len(body), len(lines) - 1)

    yield Start(tag, source=opening)
    for content, source in zip(body[:count], lines[1 : 1 + count]):
        yield Text(content, source=source)
    yield End(tag, source="".join(lines[1 + count :]))
