"""Backend — turns one D2 diagram into a PNG via the external d2 binary."""

from __future__ import annotations

import base64
import logging
import subprocess
from pathlib import Path

from mdbook_d2png.backend.models import (
    PNG_MIME_TYPE,
    ArtifactDescriptor,
    ArtifactReadError,
    FileArtifact,
    InlineArtifact,
    OutputDirectoryError,
    RendererExitError,
    RendererSpawnError,
    RendererTimeoutError,
    RenderRequest,
)
from mdbook_d2png.backend.paths import diagram_filename, relative_artifact_path
from mdbook_d2png.backend.process import renderer_process
from mdbook_d2png.config import RenderConfig, config_from_context, source_dir_from_context

logger = logging.getLogger(__name__)

# Seconds to wait for d2 before it is considered hung
RENDER_TIMEOUT = 30.0


class Backend:
    """Runs d2 for each diagram and describes where the result ended up.

    Every diagram is written to one flat directory, source_dir/output_dir,
    shared by all chapters. In inline mode the file is still written and
    then read back into a data URI.
    """

    def __init__(
        self,
        config: RenderConfig,
        source_dir: Path,
        timeout: float = RENDER_TIMEOUT,
    ) -> None:
        self.config = config
        self.source_dir = Path(source_dir)
        self.timeout = timeout

    @classmethod
    def from_context(cls, context: dict) -> Backend:
        """Create a Backend from the mdBook preprocessor context."""
        return cls(config_from_context(context), source_dir_from_context(context))

    @property
    def output_path(self) -> Path:
        """Absolute directory the PNGs are written to."""
        return self.source_dir / self.config.output_dir

    def filepath(self, request: RenderRequest) -> Path:
        return self.output_path / diagram_filename(request.section, request.diagram_index)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(self, request: RenderRequest) -> ArtifactDescriptor:
        """Render one diagram.

        Raises a RenderError subclass when only this diagram failed, and
        OutputDirectoryError when nothing can be written at all.
        """
        filepath = self.generate_diagram(request)

        if self.config.inline:
            try:
                data = filepath.read_bytes()
            except OSError as e:
                raise ArtifactReadError(
                    request.chapter, request.diagram_index, str(filepath), e
                ) from e
            encoded = base64.b64encode(data).decode("ascii")
            return InlineArtifact(url=f"data:{PNG_MIME_TYPE};base64,{encoded}")

        url = relative_artifact_path(
            request.chapter_path, self.config.output_dir, filepath.name
        )
        return FileArtifact(url=url)

    def generate_diagram(self, request: RenderRequest) -> Path:
        """Run d2 for the request and return the absolute path of the PNG."""
        self.ensure_output_dir()
        filepath = self.filepath(request)
        args = [str(self.config.path), *self.basic_args(), str(filepath)]
        self._run_process(request, args)
        logger.debug(
            "rendered diagram %s #%d -> %s", request.chapter, request.diagram_index, filepath
        )
        return filepath

    def ensure_output_dir(self) -> Path:
        output_path = self.output_path
        try:
            output_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputDirectoryError(str(output_path), e) from e
        return output_path

    def basic_args(self) -> list[str]:
        """Flags shared by every invocation, ending with "-" (read stdin).

        The output format is inferred by d2 from the destination extension.
        """
        args: list[str] = []
        if self.config.layout:
            args.extend(["--layout", self.config.layout])
        if self.config.theme_id:
            args.extend(["--theme", self.config.theme_id])
        if self.config.dark_theme_id:
            args.extend(["--dark-theme", self.config.dark_theme_id])
        fonts = self.config.fonts
        if fonts is not None:
            args.extend([
                "--font-regular", str(fonts.regular),
                "--font-italic", str(fonts.italic),
                "--font-bold", str(fonts.bold),
            ])
        args.append("-")
        return args

    # -- process management ------------------------------------------------

    def _run_process(self, request: RenderRequest, args: list[str]) -> None:
        chapter, index = request.chapter, request.diagram_index
        logger.debug("running %s", " ".join(args))

        try:
            with renderer_process(args) as proc:
                try:
                    _, stderr = proc.communicate(
                        input=request.source.encode("utf-8"), timeout=self.timeout
                    )
                except subprocess.TimeoutExpired:
                    raise RendererTimeoutError(chapter, index, self.timeout) from None
                returncode = proc.returncode
        except OSError as e:
            raise RendererSpawnError(chapter, index, str(self.config.path), e) from e

        if returncode != 0:
            raise RendererExitError(
                chapter, index, returncode, stderr.decode("utf-8", errors="replace")
            )
