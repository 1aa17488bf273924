"""Filesystem and stream helper utilities."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Iterable


def ensure_dirs(paths: Iterable[Path]) -> None:
    """Ensure that each provided path exists as a directory."""
    for path in paths:
        path.mkdir(parents=True, exist_ok=True)


def copy_stream(source: BinaryIO, destination: BinaryIO, buffer_size: int) -> int:
    """Copy ``source`` into ``destination`` in chunks of at most ``buffer_size`` bytes.

    Returns the number of bytes copied.
    """
    copied = 0
    while True:
        chunk = source.read(buffer_size)
        if not chunk:
            return copied
        destination.write(chunk)
        copied += len(chunk)
