"""Utility helpers for walking document trees."""

from __future__ import annotations

from pathlib import Path
from typing import Collection, Iterator

IGNORED_DIRS = frozenset({".git"})


def iter_files(root: Path) -> Iterator[Path]:
    """Yield every file under ``root`` in sorted order, descending into directories.

    Symlinked directories are not followed.
    """
    if root.is_file():
        yield root
        return
    for child in sorted(root.iterdir()):
        if child.is_dir():
            if not child.is_symlink() and child.name not in IGNORED_DIRS:
                yield from iter_files(child)
        elif child.is_file():
            yield child


def should_skip_file(
    path: Path, *, extensions: Collection[str], skip_names: Collection[str]
) -> bool:
    """Return True for files whose dates are not managed."""
    return path.suffix.lower() not in extensions or path.name in skip_names
