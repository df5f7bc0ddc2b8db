"""Render backend — drives the d2 binary and resolves artifact paths."""

from mdbook_d2png.backend.backend import RENDER_TIMEOUT, Backend
from mdbook_d2png.backend.models import (
    ArtifactDescriptor,
    ArtifactReadError,
    FileArtifact,
    InlineArtifact,
    OutputDirectoryError,
    RenderError,
    RendererExitError,
    RendererSpawnError,
    RendererTimeoutError,
    RenderRequest,
)
from mdbook_d2png.backend.paths import (
    diagram_filename,
    format_section,
    relative_artifact_path,
)

__all__ = [
    "ArtifactDescriptor",
    "ArtifactReadError",
    "Backend",
    "FileArtifact",
    "InlineArtifact",
    "OutputDirectoryError",
    "RENDER_TIMEOUT",
    "RenderError",
    "RenderRequest",
    "RendererExitError",
    "RendererSpawnError",
    "RendererTimeoutError",
    "diagram_filename",
    "format_section",
    "relative_artifact_path",
]
