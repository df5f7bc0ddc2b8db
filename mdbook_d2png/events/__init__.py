"""Markdown event stream — parse with markdown-it-py, write back to Markdown."""

from mdbook_d2png.events.models import (
    CodeBlock,
    End,
    Event,
    Image,
    Paragraph,
    Raw,
    Start,
    Tag,
    Text,
)
from mdbook_d2png.events.parser import parse_events
from mdbook_d2png.events.writer import MarkdownWriter, to_markdown

__all__ = [
    "CodeBlock",
    "End",
    "Event",
    "Image",
    "MarkdownWriter",
    "Paragraph",
    "Raw",
    "Start",
    "Tag",
    "Text",
    "parse_events",
    "to_markdown",
]
