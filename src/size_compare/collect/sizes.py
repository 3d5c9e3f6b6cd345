"""Raw and gzip size measurement for resolved artifact files."""

from __future__ import annotations

import asyncio
import gzip
import logging
import os
import time
from collections.abc import Callable
from pathlib import Path

from size_compare.collect.discovery import resolve_files
from size_compare.history.models import HistoryRecord, SizeEntry

GZIP_LEVEL = 9
_READ_CHUNK_BYTES = 1024 * 128

logger = logging.getLogger(__name__)


class CollectionError(Exception):
    """Raised when any file of a snapshot cannot be measured."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot measure {path}: {reason}")
        self.path = path
        self.reason = reason


class _CountingSink:
    """Write-only sink that only counts bytes."""

    def __init__(self) -> None:
        self.count = 0

    def write(self, data: bytes) -> int:
        self.count += len(data)
        return len(data)

    def flush(self) -> None:
        return None


def gzip_size(path: Path) -> int:
    """Return the byte length of the file gzip-compressed at level 9."""
    sink = _CountingSink()
    with path.open("rb") as source:
        with gzip.GzipFile(fileobj=sink, mode="wb", compresslevel=GZIP_LEVEL, mtime=0) as target:
            while True:
                chunk = source.read(_READ_CHUNK_BYTES)
                if not chunk:
                    break
                target.write(chunk)
    return sink.count


def relative_name(path: Path, cwd: Path) -> str:
    """Return a posix path relative to cwd."""
    return Path(os.path.relpath(path, cwd)).as_posix()


def measure_file(path: Path, cwd: Path, compressed_size: Callable[[Path], int]) -> SizeEntry:
    """Measure one file, raising CollectionError on any I/O failure."""
    name = relative_name(path, cwd)
    try:
        raw = path.stat().st_size
        compressed = compressed_size(path)
    except OSError as error:
        raise CollectionError(path=name, reason=error.strerror or str(error)) from error
    return SizeEntry(path=name, raw=raw, gzip=compressed)


class SizeCollector:
    """Turns glob patterns into a complete size snapshot."""

    def __init__(
        self,
        resolve: Callable[[tuple[str, ...], Path], list[Path]] = resolve_files,
        compressed_size: Callable[[Path], int] = gzip_size,
        clock_ms: Callable[[], int] | None = None,
    ) -> None:
        self._resolve = resolve
        self._compressed_size = compressed_size
        self._clock_ms = clock_ms or _now_ms

    async def collect(self, paths: list[Path], cwd: Path) -> list[SizeEntry]:
        """Measure all paths concurrently, keeping input order."""
        root = cwd.resolve()
        return list(
            await asyncio.gather(
                *(
                    asyncio.to_thread(measure_file, path, root, self._compressed_size)
                    for path in paths
                )
            )
        )

    async def snapshot(
        self, patterns: tuple[str, ...], cwd: Path, commit_sha: str
    ) -> HistoryRecord:
        """Resolve patterns, measure every match and tag the result with a commit."""
        paths = self._resolve(patterns, cwd)
        logger.debug("Patterns %s resolved to %d files", ", ".join(patterns), len(paths))
        entries = await self.collect(paths, cwd)
        for entry in entries:
            logger.debug("%s: raw=%d gzip=%d", entry.path, entry.raw, entry.gzip)
        return HistoryRecord.from_entries(
            commit_sha=commit_sha, timestamp_ms=self._clock_ms(), entries=entries
        )


def _now_ms() -> int:
    return time.time_ns() // 1_000_000
