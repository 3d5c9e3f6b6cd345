"""Deterministic glob resolution for artifact files."""

from __future__ import annotations

import glob
import os
from pathlib import Path


def split_patterns(value: str) -> tuple[str, ...]:
    """Split a newline-separated pattern input into stripped non-empty patterns."""
    return tuple(line.strip() for line in value.splitlines() if line.strip())


def resolve_files(patterns: tuple[str, ...] | list[str], cwd: Path) -> list[Path]:
    """Resolve glob patterns relative to cwd into sorted absolute file paths.

    Patterns prefixed with ``!`` remove earlier matches. Directories and broken
    symlinks are skipped.
    """
    root = cwd.resolve()
    selected: dict[str, Path] = {}
    for pattern in patterns:
        if pattern.startswith("!"):
            for match in _glob(root, pattern[1:]):
                selected.pop(match.as_posix(), None)
            continue
        for match in _glob(root, pattern):
            selected[match.as_posix()] = match
    return [selected[key] for key in sorted(selected)]


def _glob(root: Path, pattern: str) -> list[Path]:
    matches: list[Path] = []
    for raw in glob.glob(pattern, root_dir=root, recursive=True):
        path = Path(raw)
        full_path = Path(os.path.normpath(path if path.is_absolute() else root / path))
        # is_file follows symlinks, so dangling links are dropped here.
        if not full_path.is_file():
            continue
        matches.append(full_path)
    return matches
