"""Artifact discovery and size measurement."""

from .discovery import resolve_files, split_patterns
from .sizes import CollectionError, SizeCollector, gzip_size, measure_file, relative_name

__all__ = [
    "CollectionError",
    "SizeCollector",
    "gzip_size",
    "measure_file",
    "relative_name",
    "resolve_files",
    "split_patterns",
]
