"""D2BlockScanner — finds ```d2 blocks in an event stream and swaps in images."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

from mdbook_d2png.backend import Backend, RenderError, RenderRequest
from mdbook_d2png.events import CodeBlock, End, Event, Start, Text
from mdbook_d2png.preprocessor.models import ChapterInfo
from mdbook_d2png.preprocessor.splicer import image_fragment

logger = logging.getLogger(__name__)

# The code block language identifier for D2 diagrams
D2_CODE_BLOCK_LANG = "d2"


class ScanState(Enum):
    OUTSIDE = "outside"
    IN_BLOCK = "in_block"


@dataclass
class DiagramBlock:
    """A d2 block being collected, from its opening fence to its closing one."""

    chapter: ChapterInfo
    diagram_index: int
    indent: str = ""
    parts: list[str] = field(default_factory=list)

    def append(self, text: str) -> None:
        self.parts.append(text)

    @property
    def source(self) -> str:
        return "".join(self.parts)

    def to_request(self) -> RenderRequest:
        return RenderRequest(
            chapter=self.chapter.name,
            chapter_path=self.chapter.source_path,
            section=self.chapter.number,
            diagram_index=self.diagram_index,
            source=self.source,
        )


def is_d2_block_start(event: Event) -> bool:
    """True for the opening event of a fenced block tagged `d2`.

    Compares the text of the info string, not the object carrying it.
    """
    return (
        isinstance(event, Start)
        and isinstance(event.tag, CodeBlock)
        and str(event.tag.info) == D2_CODE_BLOCK_LANG
    )


class D2BlockScanner:
    """Per-chapter state machine over the event stream.

    OUTSIDE passes events through until a d2 block opens. IN_BLOCK
    swallows the block's text, and on the closing event renders the
    diagram and emits the image fragment instead (nothing if rendering
    failed). The diagram index is bumped when a block opens, so a failed
    diagram still uses up its number.
    """

    def __init__(self, backend: Backend, chapter: ChapterInfo) -> None:
        self.backend = backend
        self.chapter = chapter
        self.state = ScanState.OUTSIDE
        self.block: DiagramBlock | None = None
        self.diagram_index = 0

    def process(self, events: Iterable[Event]) -> Iterator[Event]:
        for event in events:
            yield from self.process_event(event)

    def process_event(self, event: Event) -> list[Event]:
        """Return the events to emit for one input event (possibly none)."""
        if self.state is ScanState.OUTSIDE:
            if is_d2_block_start(event):
                self._start_block(event.tag)
                return []
            return [event]

        if isinstance(event, Text):
            self.block.append(event.text)
            return []
        if isinstance(event, End) and isinstance(event.tag, CodeBlock):
            return self._end_block()
        # Nothing else belongs inside a code block; leave it alone
        return [event]

    def _start_block(self, tag: CodeBlock) -> None:
        self.diagram_index += 1
        self.block = DiagramBlock(self.chapter, self.diagram_index, indent=tag.indent)
        self.state = ScanState.IN_BLOCK

    def _end_block(self) -> list[Event]:
        block = self.block
        self.block = None
        self.state = ScanState.OUTSIDE

        try:
            artifact = self.backend.render(block.to_request())
        except RenderError as e:
            logger.error("Failed to render D2 diagram: %s", e)
            return []
        return image_fragment(artifact, indent=block.indent)


def process_events(
    backend: Backend, chapter: ChapterInfo, events: Iterable[Event]
) -> Iterator[Event]:
    """Stream transformer: events in, events out, d2 blocks replaced by images."""
    return D2BlockScanner(backend, chapter).process(events)
