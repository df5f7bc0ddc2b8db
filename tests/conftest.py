"""Shared test fixtures for mdbook-d2-png."""

import json
import logging
import stat
import sys
from pathlib import Path

import pytest

from mdbook_d2png import log as mdbook_log
from mdbook_d2png.backend import Backend
from mdbook_d2png.config import RenderConfig
from mdbook_d2png.preprocessor import ChapterInfo

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"

SIMPLE_DIAGRAM = "a: A\nb: B\na -> b: hello\n"

# Stands in for d2: records its argv and stdin, writes a fake PNG to the last argument
_FAKE_D2 = """\
#!{python}
import json, sys
args = sys.argv[1:]
source = sys.stdin.read()
with open({calls!r}, "a") as log:
    log.write(json.dumps({{"args": args, "stdin": source}}) + "\\n")
with open(args[-1], "wb") as out:
    out.write({magic!r} + source.encode("utf-8"))
"""

_FAILING_D2 = """\
#!{python}
import sys
sys.stdin.read()
sys.stderr.write("err: 1:1: unexpected token\\nerr: 2:3: missing edge\\n")
sys.exit(1)
"""

_HANGING_D2 = """\
#!{python}
import time
time.sleep(60)
"""


def _write_script(path: Path, template: str, **kwargs) -> Path:
    path.write_text(template.format(python=sys.executable, **kwargs))
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Drop handlers the CLI installs so they do not outlive the test's streams."""
    root = logging.getLogger()
    level = root.level
    yield
    if mdbook_log._handler is not None:
        root.removeHandler(mdbook_log._handler)
        mdbook_log._handler = None
    root.setLevel(level)


def read_calls(renderer: Path) -> list[dict]:
    """The invocations recorded by the fake d2 at `renderer`."""
    calls = renderer.parent / "calls.jsonl"
    if not calls.exists():
        return []
    return [json.loads(line) for line in calls.read_text().splitlines()]


@pytest.fixture
def fake_d2(tmp_path):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)
    return _write_script(
        bin_dir / "d2",
        _FAKE_D2,
        calls=str(bin_dir / "calls.jsonl"),
        magic=PNG_MAGIC,
    )


@pytest.fixture
def failing_d2(tmp_path):
    bin_dir = tmp_path / "bin-failing"
    bin_dir.mkdir(exist_ok=True)
    return _write_script(bin_dir / "d2", _FAILING_D2)


@pytest.fixture
def hanging_d2(tmp_path):
    bin_dir = tmp_path / "bin-hanging"
    bin_dir.mkdir(exist_ok=True)
    return _write_script(bin_dir / "d2", _HANGING_D2)


@pytest.fixture
def book_src(tmp_path):
    """A book's source directory."""
    src = tmp_path / "book" / "src"
    src.mkdir(parents=True)
    return src


@pytest.fixture
def make_backend(book_src):
    def _make(renderer: Path, timeout: float = 10.0, **config) -> Backend:
        return Backend(RenderConfig(path=renderer, **config), book_src, timeout=timeout)

    return _make


@pytest.fixture
def root_chapter():
    return ChapterInfo(name="Chapter 1", source_path="chapter_1.md", number=(1,))


@pytest.fixture
def nested_chapter():
    return ChapterInfo(name="Nested", source_path="guide/nested.md", number=(2, 1))
