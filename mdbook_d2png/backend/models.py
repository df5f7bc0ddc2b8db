"""Pydantic models and exceptions for the render backend."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

PNG_MIME_TYPE = "image/png"


class RenderError(Exception):
    """A single diagram could not be rendered. The rest of the chapter proceeds."""

    def __init__(self, chapter: str, diagram_index: int, message: str) -> None:
        self.chapter = chapter
        self.diagram_index = diagram_index
        super().__init__(message)


class RendererSpawnError(RenderError):
    """The d2 executable could not be launched."""

    def __init__(self, chapter: str, diagram_index: int, path: str, cause: OSError) -> None:
        self.path = path
        super().__init__(
            chapter,
            diagram_index,
            f"failed to spawn D2 process '{path}' ({chapter}, #{diagram_index}): {cause}",
        )
        self.__cause__ = cause


class RendererTimeoutError(RenderError):
    """The renderer did not finish within the timeout and was killed."""

    def __init__(self, chapter: str, diagram_index: int, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(
            chapter,
            diagram_index,
            f"D2 renderer hung ({chapter}, #{diagram_index}): killed after {timeout:g}s",
        )


class RendererExitError(RenderError):
    """d2 exited non-zero. The message embeds its stderr, indented."""

    def __init__(self, chapter: str, diagram_index: int, returncode: int, stderr: str) -> None:
        self.returncode = returncode
        self.stderr = stderr
        details = f"\n{stderr}".replace("\n", "\n  ")
        super().__init__(
            chapter,
            diagram_index,
            f"failed to compile D2 diagram ({chapter}, #{diagram_index}):{details}",
        )


class ArtifactReadError(RenderError):
    """Inline mode could not read back the PNG d2 wrote."""

    def __init__(self, chapter: str, diagram_index: int, path: str, cause: OSError) -> None:
        self.path = path
        super().__init__(
            chapter,
            diagram_index,
            f"failed to read generated PNG file {path} ({chapter}, #{diagram_index}): {cause}",
        )
        self.__cause__ = cause


class OutputDirectoryError(Exception):
    """The shared output directory could not be created. Aborts the run."""

    def __init__(self, path: str, cause: OSError) -> None:
        self.path = path
        super().__init__(f"failed to create output directory {path}: {cause}")
        self.__cause__ = cause


class RenderRequest(BaseModel):
    """Everything the backend needs to render one diagram."""

    model_config = ConfigDict(frozen=True)

    chapter: str
    chapter_path: str | None = None  # relative to the source root
    section: tuple[int, ...] | None = None
    diagram_index: int
    source: str


class FileArtifact(BaseModel):
    """A PNG referenced by a path relative to the chapter."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["file"] = "file"
    url: str


class InlineArtifact(BaseModel):
    """A PNG embedded as a base64 data URI."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["inline"] = "inline"
    url: str
    mime_type: str = PNG_MIME_TYPE


ArtifactDescriptor = FileArtifact | InlineArtifact
