"""
tempfiles.py — Per-request scratch files that are always removed.

A request that downloads media writes it to a uniquely named file in the
configured temp directory (video id + millisecond timestamp, so concurrent
requests never collide) and the file is deleted when the `with` block exits,
whichever way it exits.  Siblings sharing its name as a prefix (a
downloader's ".part" or fragment files left by an interrupted download) go
with it.
"""

from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

_PREFIX = "ytflow"


def temp_path(directory: str | os.PathLike[str], video_id: str, ext: str) -> Path:
    """Build a unique scratch path like /tmp/ytflow_abc123_1700000000000.m4a."""
    stamp = time.time_ns() // 1_000_000
    suffix = f".{ext}" if ext else ""
    return Path(directory) / f"{_PREFIX}_{video_id}_{stamp}{suffix}"


def remove_quietly(path: Path) -> None:
    """Delete *path*; a failure is logged and never raised."""
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove temp file %s: %s", path, exc)


@contextmanager
def scoped_temp_file(
    directory: str | os.PathLike[str],
    video_id: str,
    ext: str = "",
) -> Iterator[Path]:
    """
    Yield a scratch path and delete the file, and any partial-download
    siblings named after it, on exit.

    The file is not created here; the provider that downloads into it does
    that.  Cleanup runs on normal return and on exceptions alike, and a
    cleanup failure never replaces the exception already in flight.
    """
    Path(directory).mkdir(parents=True, exist_ok=True)
    path = temp_path(directory, video_id, ext)
    try:
        yield path
    finally:
        remove_quietly(path)
        for partial in path.parent.glob(f"{path.name}?*"):
            remove_quietly(partial)
