"""
TaskQuest — Key-Value Stores.

Local persistence for the three dashboard blobs (stats, tasks, last active
date). Every backend implements StorePort and reports failures as
StoreUnavailableError so the core never sees sqlite3/OS exceptions.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import sqlite3
import tempfile
from pathlib import Path
from typing import Any

from taskquest.ports.store_port import StoreUnavailableError

logger = logging.getLogger(__name__)


class SQLiteStore:
    """SQLite-backed key-value store holding JSON text per key."""

    def __init__(self, db_path: str | None = None) -> None:
        if db_path is None:
            from taskquest.config import settings
            db_path = settings.DATABASE_PATH

        self._db_path = db_path
        # An in-memory database only lives as long as its connection
        self._shared_conn: sqlite3.Connection | None = None
        if db_path == ":memory:":
            self._shared_conn = self._open()
        else:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _open(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"Cannot open store at {self._db_path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        return conn

    def _connect(self) -> sqlite3.Connection:
        if self._shared_conn is not None:
            return self._shared_conn
        return self._open()

    def _init_db(self) -> None:
        """Create the kv table if it doesn't exist."""
        try:
            with self._connect() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS kv (
                        key        TEXT PRIMARY KEY,
                        value      TEXT NOT NULL,
                        updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                    )
                """)
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"Cannot open store at {self._db_path}: {exc}") from exc
        logger.debug("KV table initialized at %s", self._db_path)

    async def get(self, key: str) -> Any | None:
        """Return the decoded JSON value for key, or None if absent."""
        try:
            with self._connect() as conn:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"Failed to read '{key}': {exc}") from exc
        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError as exc:
            raise StoreUnavailableError(f"Corrupt JSON stored under '{key}': {exc}") from exc

    async def set(self, key: str, value: Any) -> None:
        """Encode value as JSON and upsert it under key."""
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise StoreUnavailableError(f"Value for '{key}' is not JSON-serializable: {exc}") from exc
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO kv (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, payload),
                )
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"Failed to write '{key}': {exc}") from exc
        logger.debug("Stored '%s' (%d bytes)", key, len(payload))


class JsonFileStore:
    """All keys in a single JSON object file, rewritten atomically on set."""

    def __init__(self, path: str | None = None) -> None:
        if path is None:
            from taskquest.config import settings
            path = settings.JSON_STORE_PATH

        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def _read_all(self) -> dict:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise StoreUnavailableError(f"Failed to read {self._path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise StoreUnavailableError(f"Corrupt JSON in {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreUnavailableError(f"Expected a JSON object in {self._path}")
        return data

    async def get(self, key: str) -> Any | None:
        return self._read_all().get(key)

    async def set(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        try:
            payload = json.dumps(data, indent=2)
        except (TypeError, ValueError) as exc:
            raise StoreUnavailableError(f"Value for '{key}' is not JSON-serializable: {exc}") from exc

        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_path, self._path)
        except OSError as exc:
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)
            raise StoreUnavailableError(f"Failed to write {self._path}: {exc}") from exc
        logger.debug("Stored '%s' in %s", key, self._path)


class MemoryStore:
    """Process-local store, mainly for tests and the "memory" backend.

    Values are copied on the way in and out so callers never share
    references with the stored state.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(key))

    async def set(self, key: str, value: Any) -> None:
        try:
            json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise StoreUnavailableError(f"Value for '{key}' is not JSON-serializable: {exc}") from exc
        self._data[key] = copy.deepcopy(value)
