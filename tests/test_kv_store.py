"""Tests for taskquest.data.kv_store — SQLite, JSON file and memory stores."""

import json
import shutil
import sqlite3

import pytest

from taskquest.data.kv_store import JsonFileStore, MemoryStore, SQLiteStore
from taskquest.ports.store_port import StoreUnavailableError


class TestSQLiteStore:
    @pytest.mark.asyncio
    async def test_missing_key_returns_none(self, sqlite_store):
        assert await sqlite_store.get("user-stats") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, sqlite_store):
        await sqlite_store.set("user-tasks", [{"id": "t1", "title": "Read"}])
        assert await sqlite_store.get("user-tasks") == [{"id": "t1", "title": "Read"}]

    @pytest.mark.asyncio
    async def test_set_overwrites(self, sqlite_store):
        await sqlite_store.set("last-active-date", "2026-10-18")
        await sqlite_store.set("last-active-date", "2026-10-19")
        assert await sqlite_store.get("last-active-date") == "2026-10-19"

    @pytest.mark.asyncio
    async def test_survives_reopen(self, tmp_db_path):
        await SQLiteStore(db_path=tmp_db_path).set("user-stats", {"totalPoints": 30})
        reopened = SQLiteStore(db_path=tmp_db_path)
        assert await reopened.get("user-stats") == {"totalPoints": 30}

    @pytest.mark.asyncio
    async def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "store.db"
        store = SQLiteStore(db_path=str(path))
        await store.set("k", 1)
        assert path.exists()

    @pytest.mark.asyncio
    async def test_corrupt_json_raises_store_unavailable(self, sqlite_store, tmp_db_path):
        conn = sqlite3.connect(tmp_db_path)
        conn.execute("INSERT INTO kv (key, value) VALUES (?, ?)", ("user-stats", "{not json"))
        conn.commit()
        conn.close()
        with pytest.raises(StoreUnavailableError):
            await sqlite_store.get("user-stats")

    @pytest.mark.asyncio
    async def test_unserializable_value_raises(self, sqlite_store):
        with pytest.raises(StoreUnavailableError):
            await sqlite_store.set("k", object())

    @pytest.mark.asyncio
    async def test_unopenable_path_raises(self, tmp_path):
        # A directory cannot be opened as a database file
        with pytest.raises(StoreUnavailableError):
            SQLiteStore(db_path=str(tmp_path))

    @pytest.mark.asyncio
    async def test_in_memory_database_keeps_its_table(self):
        store = SQLiteStore(db_path=":memory:")
        await store.set("user-stats", {"totalPoints": 20})
        await store.set("user-tasks", [])
        assert await store.get("user-stats") == {"totalPoints": 20}
        assert await store.get("user-tasks") == []

    @pytest.mark.asyncio
    async def test_in_memory_databases_are_separate(self):
        first = SQLiteStore(db_path=":memory:")
        second = SQLiteStore(db_path=":memory:")
        await first.set("k", 1)
        assert await second.get("k") is None


class TestJsonFileStore:
    @pytest.mark.asyncio
    async def test_missing_file_reads_as_empty(self, tmp_path):
        store = JsonFileStore(path=str(tmp_path / "store.json"))
        assert await store.get("user-stats") is None

    @pytest.mark.asyncio
    async def test_keys_share_one_file(self, tmp_path):
        path = tmp_path / "store.json"
        store = JsonFileStore(path=str(path))
        await store.set("user-stats", {"totalPoints": 10})
        await store.set("last-active-date", "2026-10-19")
        on_disk = json.loads(path.read_text())
        assert on_disk == {"user-stats": {"totalPoints": 10}, "last-active-date": "2026-10-19"}

    @pytest.mark.asyncio
    async def test_no_temp_files_left_behind(self, tmp_path):
        store = JsonFileStore(path=str(tmp_path / "store.json"))
        await store.set("k", [1, 2, 3])
        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    @pytest.mark.asyncio
    async def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2")
        with pytest.raises(StoreUnavailableError):
            await JsonFileStore(path=str(path)).get("k")

    @pytest.mark.asyncio
    async def test_non_object_file_raises(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2]")
        with pytest.raises(StoreUnavailableError):
            await JsonFileStore(path=str(path)).get("k")

    @pytest.mark.asyncio
    async def test_write_into_vanished_directory_raises(self, tmp_path):
        folder = tmp_path / "sub"
        store = JsonFileStore(path=str(folder / "store.json"))
        shutil.rmtree(folder)
        with pytest.raises(StoreUnavailableError):
            await store.set("user-tasks", [])

    @pytest.mark.asyncio
    async def test_unreadable_path_raises(self, tmp_path):
        # A directory where the file should be
        path = tmp_path / "store.json"
        path.mkdir()
        with pytest.raises(StoreUnavailableError):
            await JsonFileStore(path=str(path)).get("k")


class TestMemoryStore:
    @pytest.mark.asyncio
    async def test_values_are_copied(self):
        store = MemoryStore()
        tasks = [{"id": "t1"}]
        await store.set("user-tasks", tasks)
        tasks.append({"id": "t2"})
        fetched = await store.get("user-tasks")
        fetched.append({"id": "t3"})
        assert await store.get("user-tasks") == [{"id": "t1"}]

    @pytest.mark.asyncio
    async def test_initial_data(self):
        store = MemoryStore({"user-stats": {"totalPoints": 5}})
        assert await store.get("user-stats") == {"totalPoints": 5}

    @pytest.mark.asyncio
    async def test_unserializable_value_raises(self):
        with pytest.raises(StoreUnavailableError):
            await MemoryStore().set("k", {1, 2})
