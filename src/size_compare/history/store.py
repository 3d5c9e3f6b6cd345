"""Gist-backed persistence for the history log."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from size_compare.history.log import EMPTY_HISTORY_TEXT, load_history, serialize
from size_compare.history.models import HistoryLog

DEFAULT_HISTORY_FILE = "history.json"

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    """Named text file store keyed by an opaque id."""

    async def get(self, blob_id: str) -> dict[str, str]: ...

    async def put(self, blob_id: str, files: dict[str, str]) -> None: ...


@dataclass(slots=True, frozen=True)
class LoadedHistory:
    """History as read from the store, with the text it was parsed from."""

    log: HistoryLog
    original_text: str
    files: dict[str, str]


class HistoryStore:
    """Loads and conditionally writes the history file of one blob."""

    def __init__(
        self, blob_store: BlobStore, blob_id: str, file_name: str = DEFAULT_HISTORY_FILE
    ) -> None:
        self._blob_store = blob_store
        self._blob_id = blob_id
        self._file_name = file_name

    @property
    def file_name(self) -> str:
        """Return the history file name inside the blob."""
        return self._file_name

    async def load(self) -> LoadedHistory:
        """Read and validate the history file, defaulting to an empty log."""
        files = dict(await self._blob_store.get(self._blob_id))
        original_text = files.get(self._file_name)
        if original_text is None:
            logger.debug("No %s in blob %s, starting empty history", self._file_name, self._blob_id)
            original_text = EMPTY_HISTORY_TEXT
        log = load_history(original_text)
        logger.debug("Loaded %d history records", len(log.records))
        return LoadedHistory(log=log, original_text=original_text, files=files)

    async def save(self, loaded: LoadedHistory, log: HistoryLog) -> bool:
        """Write the log back only when its canonical text changed."""
        updated_text = serialize(log)
        if updated_text == loaded.original_text:
            logger.debug("History unchanged, skipping write")
            return False
        files = dict(loaded.files)
        files[self._file_name] = updated_text
        logger.debug("History changed, writing %s to blob %s", self._file_name, self._blob_id)
        await self._blob_store.put(self._blob_id, files)
        return True
