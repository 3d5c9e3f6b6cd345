"""Size history model, schema and persistence."""

from .log import (
    EMPTY_HISTORY_TEXT,
    HISTORY_SCHEMA_VERSION,
    HistorySchemaError,
    empty_history,
    find_record,
    find_record_index,
    load_history,
    parse_history,
    serialize,
    upsert,
)
from .models import FileSizes, HistoryLog, HistoryRecord, SchemaError, SizeEntry
from .store import DEFAULT_HISTORY_FILE, BlobStore, HistoryStore, LoadedHistory

__all__ = [
    "BlobStore",
    "DEFAULT_HISTORY_FILE",
    "EMPTY_HISTORY_TEXT",
    "FileSizes",
    "HISTORY_SCHEMA_VERSION",
    "HistoryLog",
    "HistoryRecord",
    "HistorySchemaError",
    "HistoryStore",
    "LoadedHistory",
    "SchemaError",
    "SizeEntry",
    "empty_history",
    "find_record",
    "find_record_index",
    "load_history",
    "parse_history",
    "serialize",
    "upsert",
]
