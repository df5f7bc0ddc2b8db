"""Replacement fragment for a rendered diagram."""

from __future__ import annotations

from mdbook_d2png.backend.models import ArtifactDescriptor
from mdbook_d2png.events import End, Event, Image, Paragraph, Start


def image_fragment(artifact: ArtifactDescriptor, indent: str = "") -> list[Event]:
    """A paragraph holding one image with empty alt text and no title.

    The shape is the same for file and inline artifacts; only the URL differs.
    """
    image = Image(dest_url=artifact.url)
    paragraph = Paragraph(indent=indent)
    return [Start(paragraph), Start(image), End(image), End(paragraph)]
