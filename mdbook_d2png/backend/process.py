"""Scoped handle around the d2 child process."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

logger = logging.getLogger(__name__)


@contextmanager
def renderer_process(args: Sequence[str]) -> Iterator[subprocess.Popen]:
    """Spawn the renderer with all three standard streams piped.

    However the block exits (success, error, timeout), a child that is
    still running is killed, its pipes are closed and it is reaped.
    OSError from the spawn itself propagates to the caller.
    """
    proc = subprocess.Popen(
        list(args),
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )
    try:
        yield proc
    finally:
        if proc.poll() is None:
            logger.debug("killing renderer pid %d", proc.pid)
            proc.kill()
        for stream in (proc.stdin, proc.stdout, proc.stderr):
            if stream is not None:
                stream.close()
        proc.wait()
