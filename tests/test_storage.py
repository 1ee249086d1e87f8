import pytest

from notepadzilla.errors import StorageUnavailable
from notepadzilla.models.note import Note
from notepadzilla.repository import NoteRepository
from notepadzilla.storage import (
    MemoryKeyValueStore,
    SQLKeyValueStore,
    UnavailableKeyValueStore,
    open_store,
)


def _sqlite_url(path):
    return f"sqlite+aiosqlite:///{path}"


@pytest.mark.asyncio
async def test_memory_store_get_set_delete():
    store = MemoryKeyValueStore({"a": "1"})
    assert await store.get("a") == "1"
    await store.set("a", "2")
    await store.set("b", "3")
    assert await store.get("a") == "2"
    await store.delete("a")
    await store.delete("missing")
    assert await store.get("a") is None
    assert await store.get("b") == "3"


@pytest.mark.asyncio
async def test_unavailable_store_reads_nothing_and_fails_writes():
    store = UnavailableKeyValueStore("disabled")
    assert store.available is False
    assert await store.get("currentNote") is None
    with pytest.raises(StorageUnavailable, match="disabled"):
        await store.set("currentNote", "{}")
    with pytest.raises(StorageUnavailable):
        await store.delete("currentNote")


@pytest.mark.asyncio
async def test_sql_store_persists_across_reopen(tmp_path):
    url = _sqlite_url(tmp_path / "notes.db")
    store = await SQLKeyValueStore(url).open()
    try:
        assert await store.get("k") is None
        await store.set("k", "first")
        await store.set("k", "second")
        await store.set("gone", "x")
        await store.delete("gone")
        await store.delete("never-there")
    finally:
        await store.close()

    reopened = await SQLKeyValueStore(url).open()
    try:
        assert await reopened.get("k") == "second"
        assert await reopened.get("gone") is None
    finally:
        await reopened.close()


@pytest.mark.asyncio
async def test_open_store_degrades_when_database_cannot_open(tmp_path, caplog):
    url = _sqlite_url(tmp_path / "missing-dir" / "notes.db")
    store = await open_store(url)

    assert isinstance(store, UnavailableKeyValueStore)
    assert store.available is False
    assert "Storage unavailable" in caplog.text
    with pytest.raises(StorageUnavailable):
        await store.set("currentNote", "{}")


@pytest.mark.asyncio
async def test_open_store_returns_sql_store(tmp_path):
    store = await open_store(_sqlite_url(tmp_path / "ok.db"))
    try:
        assert isinstance(store, SQLKeyValueStore)
        assert store.available is True
    finally:
        await store.close()


@pytest.mark.asyncio
async def test_repository_over_sql_store(tmp_path, clock):
    store = await SQLKeyValueStore(_sqlite_url(tmp_path / "repo.db")).open()
    try:
        repository = NoteRepository(store, clock=clock)
        note = Note(id="n1", title="Stored", content="<p>body</p>", created_at=clock(), updated_at=clock())
        await repository.save_current(note)
        await repository.upsert(note)

        assert await repository.load_current() == note
        assert await repository.get("n1") == note
    finally:
        await store.close()
