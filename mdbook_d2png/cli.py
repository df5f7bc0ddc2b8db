"""CLI entry point for mdbook-d2-png.

Without a subcommand it speaks the mdBook preprocessor protocol: read
[context, book] JSON on stdin, write the processed book JSON to stdout.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from pathlib import Path
from typing import IO, Annotated

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

from mdbook_d2png.backend import Backend, OutputDirectoryError
from mdbook_d2png.config import DEFAULT_CONFIG_TEMPLATE, RenderConfig, load_config
from mdbook_d2png.config.loader import DEFAULT_CONFIG_FILE
from mdbook_d2png.log import LOG_ENV_VAR, configure_logging
from mdbook_d2png.preprocessor import ChapterInfo, D2Preprocessor, render_chapter

logger = logging.getLogger(__name__)

# mdBook major.minor versions whose book JSON layout this preprocessor understands
SUPPORTED_MDBOOK_VERSIONS = ("0.4", "0.5")

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)(?:\.\d+)?(?:[-+].*)?$")
_SECTION_RE = re.compile(r"^\d+(?:\.\d+)*\.?$")

app = typer.Typer(
    name="mdbook-d2-png",
    help="PNG-output mdBook preprocessor for D2 diagrams (see [preprocessor.d2-png] in book.toml).",
    add_completion=False,
)

config_app = typer.Typer(help="Manage the standalone d2png.yaml configuration.")
app.add_typer(config_app, name="config")

# stdout belongs to mdBook; human-facing messages go to stderr
err_console = Console(stderr=True)

# Global state
_config_path: str | None = None


def _get_config() -> RenderConfig:
    return load_config(_config_path)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to d2png.yaml (render command)")
    ] = None,
    log_level: Annotated[
        str,
        typer.Option("--log-level", envvar=LOG_ENV_VAR, help="debug, info, warn or error"),
    ] = "info",
    log_format: Annotated[
        str, typer.Option("--log-format", help="text or json")
    ] = "text",
) -> None:
    """Convert fenced d2 code blocks into PNG images for mdBook.

    Called without a command, acts as the preprocessor mdBook runs.
    """
    global _config_path
    _config_path = config

    try:
        configure_logging(log_level, log_format)  # type: ignore[arg-type]
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if ctx.invoked_subcommand is not None:
        return

    try:
        handle_preprocessing(D2Preprocessor(), sys.stdin, sys.stdout)
    except (ValueError, OutputDirectoryError, OSError) as e:
        logger.error("Preprocessing failed: %s", e)
        raise typer.Exit(1)


def handle_preprocessing(pre: D2Preprocessor, stdin: IO[str], stdout: IO[str]) -> None:
    """Run one mdBook preprocessor round trip over the given streams."""
    try:
        context, book = json.load(stdin)
    except (ValueError, TypeError) as e:
        raise ValueError(
            f"Failed to parse mdBook input: {e}. "
            "This preprocessor should be called by mdBook, not directly."
        ) from e
    if not isinstance(context, dict) or not isinstance(book, dict):
        raise ValueError("Failed to parse mdBook input: expected [context, book] objects")

    check_mdbook_version(pre.name, context.get("mdbook_version", ""))

    processed_book = pre.run(context, book)
    json.dump(processed_book, stdout)


def check_mdbook_version(name: str, version: str) -> None:
    """Warn when mdBook is a version this preprocessor was not written against."""
    m = _VERSION_RE.match(version)
    if m is None:
        raise ValueError(f"Invalid mdBook version {version!r}")
    major_minor = f"{m.group(1)}.{m.group(2)}"
    if major_minor not in SUPPORTED_MDBOOK_VERSIONS:
        logger.warning(
            "The %s plugin was built against mdbook version %s, but is being called from version %s",
            name,
            " / ".join(SUPPORTED_MDBOOK_VERSIONS),
            version,
        )


@app.command()
def supports(
    renderer: str = typer.Argument(..., help="Renderer name (e.g. html)"),
) -> None:
    """Check if a renderer is supported. Used internally by mdBook."""
    if not D2Preprocessor().supports_renderer(renderer):
        raise typer.Exit(1)


def _parse_section(section: str | None) -> tuple[int, ...] | None:
    """Parse "1.2" or "1.2." into (1, 2)."""
    if not section:
        return None
    if not _SECTION_RE.match(section):
        raise ValueError(f"Invalid section number {section!r}: expected e.g. '1.2'")
    return tuple(int(n) for n in section.rstrip(".").split("."))


@app.command()
def render(
    file: str = typer.Argument(..., help="Markdown file to process"),
    src: str | None = typer.Option(
        None, "--src", help="Source root the output dir lives in (default: the file's directory)"
    ),
    section: str | None = typer.Option(
        None, "--section", help="Section number used in diagram filenames, e.g. 1.2"
    ),
    output: str | None = typer.Option(None, "--output", "-o", help="Write markdown to file"),
    inline: bool | None = typer.Option(
        None, "--inline/--no-inline", help="Embed PNGs as data URIs (overrides config)"
    ),
) -> None:
    """Render the d2 blocks of a single Markdown file outside of mdBook."""
    try:
        cfg = _get_config()
        number = _parse_section(section)
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if inline is not None:
        cfg = cfg.model_copy(update={"inline": inline})

    path = Path(file)
    src_dir = Path(src) if src else path.parent
    try:
        chapter_path = path.resolve().relative_to(src_dir.resolve())
    except ValueError:
        err_console.print(f"[red]Error:[/red] {file} is not inside source root {src_dir}")
        raise typer.Exit(1)

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        err_console.print(f"[red]Error:[/red] Could not read '{escape(file)}': {escape(str(e))}")
        raise typer.Exit(1)

    chapter = ChapterInfo(name=path.stem, source_path=chapter_path.as_posix(), number=number)
    backend = Backend(cfg, src_dir)

    try:
        result = render_chapter(backend, chapter, content)
    except OutputDirectoryError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if output:
        Path(output).write_text(result, encoding="utf-8")
        err_console.print(f"[green]Written to[/green] {output}")
    else:
        sys.stdout.write(result)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    import yaml

    try:
        cfg = _get_config()
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    dumped = cfg.model_dump(mode="json", by_alias=True, exclude_none=True)
    rprint(Syntax(yaml.safe_dump(dumped, default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    path: str = typer.Option(DEFAULT_CONFIG_FILE, "--path", help="Where to write the config"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create a default d2png.yaml."""
    target = Path(path)
    if target.exists() and not force:
        rprint(f"[yellow]{target} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
