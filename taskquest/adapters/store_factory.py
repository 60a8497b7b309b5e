"""Store factory — creates the right key-value store based on config."""

from __future__ import annotations

from taskquest.config import settings
from taskquest.ports.store_port import StorePort


def create_store() -> StorePort:
    """Return the store matching the STORE_BACKEND setting."""
    backend = settings.STORE_BACKEND.lower()

    if backend == "sqlite":
        from taskquest.data.kv_store import SQLiteStore

        return SQLiteStore(db_path=settings.DATABASE_PATH)

    if backend == "json":
        from taskquest.data.kv_store import JsonFileStore

        return JsonFileStore(path=settings.JSON_STORE_PATH)

    if backend == "memory":
        from taskquest.data.kv_store import MemoryStore

        return MemoryStore()

    raise ValueError(f"Unknown STORE_BACKEND: {backend!r}")
