"""Pydantic models for the d2-png preprocessor configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict


def _kebab(name: str) -> str:
    return name.replace("_", "-")


class Fonts(BaseModel):
    """Custom font files passed to d2. Only ttf fonts are valid."""

    model_config = ConfigDict(frozen=True)

    regular: Path
    italic: Path
    bold: Path


class RenderConfig(BaseModel):
    """The [preprocessor.d2-png] table of book.toml.

    Built once per run and shared read-only by every render request.
    Unknown keys (mdBook's own `command`, `renderers`, `before`, `after`)
    are ignored.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=_kebab,
        populate_by_name=True,
        extra="ignore",
    )

    path: Path = Path("d2")
    layout: str | None = None
    output_dir: Path = Path("d2")
    inline: bool = False
    fonts: Fonts | None = None
    theme_id: str | None = None
    dark_theme_id: str | None = None
