from __future__ import annotations

import pytest
from helpers.fakes import FakeBlobStore, make_record

from size_compare.github.client import GitHubApiError
from size_compare.history import (
    EMPTY_HISTORY_TEXT,
    HistorySchemaError,
    HistoryStore,
    serialize,
    upsert,
)


@pytest.mark.asyncio
async def test_missing_history_file_loads_empty_log(blob_store: FakeBlobStore) -> None:
    store = HistoryStore(blob_store, "gist-1")

    loaded = await store.load()

    assert loaded.log.records == ()
    assert loaded.original_text == EMPTY_HISTORY_TEXT


@pytest.mark.asyncio
async def test_unchanged_history_is_not_written(blob_store: FakeBlobStore) -> None:
    store = HistoryStore(blob_store, "gist-1")
    loaded = await store.load()
    log = upsert(loaded.log, make_record("a", {"x.js": 10}))
    assert await store.save(loaded, log) is True

    reloaded = await store.load()
    written = await store.save(reloaded, upsert(reloaded.log, make_record("a", {"x.js": 10})))

    assert written is False
    assert len(blob_store.puts) == 1


@pytest.mark.asyncio
async def test_save_keeps_sibling_gist_files() -> None:
    blob_store = FakeBlobStore({"README.md": "# sizes\n", "custom.json": EMPTY_HISTORY_TEXT})
    store = HistoryStore(blob_store, "gist-1", file_name="custom.json")
    loaded = await store.load()

    await store.save(loaded, upsert(loaded.log, make_record("a", {"x.js": 10})))

    _, files = blob_store.puts[-1]
    assert files["README.md"] == "# sizes\n"
    assert "history.json" not in files
    assert files["custom.json"] == serialize(upsert(loaded.log, make_record("a", {"x.js": 10})))


@pytest.mark.asyncio
async def test_invalid_stored_history_fails_load() -> None:
    blob_store = FakeBlobStore({"history.json": '{"schemaVersion": 42, "history": []}'})

    with pytest.raises(HistorySchemaError):
        await HistoryStore(blob_store, "gist-1").load()


@pytest.mark.asyncio
async def test_write_failure_propagates(blob_store: FakeBlobStore) -> None:
    store = HistoryStore(blob_store, "gist-1")
    loaded = await store.load()
    blob_store.put_error = GitHubApiError("PATCH /gists/gist-1 returned 500", status=500)

    with pytest.raises(GitHubApiError):
        await store.save(loaded, upsert(loaded.log, make_record("a", {"x.js": 10})))
