"""Pydantic models for the mdBook side of the preprocessor."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ChapterInfo(BaseModel):
    """The fields of an mdBook chapter the scanner needs.

    Validated from the chapter JSON; the JSON itself is edited in place
    so fields this model does not know about survive the round trip.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    source_path: str | None = None  # relative to the book's source dir
    number: tuple[int, ...] | None = None
