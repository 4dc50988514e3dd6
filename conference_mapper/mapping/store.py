"""
Durable id -> conference name persistence.

Keys are the decimal string form of the id and values are the UTF-8 bytes of
the normalized name. The store is a plain overwrite-on-write key-value layer;
collision handling lives in the resolver.
"""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path
from typing import Iterator, Protocol, runtime_checkable

from loguru import logger

from .errors import MappingDecodeError, StoreError


def _decode(key: str, raw: bytes | str) -> str:
    if isinstance(raw, str):
        return raw
    try:
        return bytes(raw).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MappingDecodeError(key, str(exc)) from exc


@runtime_checkable
class MappingStore(Protocol):
    """Key-value persistence used by the resolver."""

    def get(self, mapping_id: int) -> str | None: ...

    def put(self, mapping_id: int, name: str) -> None: ...

    def items(self) -> Iterator[tuple[int, str]]: ...

    def __len__(self) -> int: ...

    def close(self) -> None: ...


class InMemoryMappingStore:
    """Dict-backed store for tests and throwaway runs."""

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def get(self, mapping_id: int) -> str | None:
        key = str(mapping_id)
        with self._lock:
            raw = self._data.get(key)
        if raw is None:
            return None
        return _decode(key, raw)

    def put(self, mapping_id: int, name: str) -> None:
        with self._lock:
            self._data[str(mapping_id)] = name.encode("utf-8")

    def items(self) -> Iterator[tuple[int, str]]:
        with self._lock:
            snapshot = list(self._data.items())
        for key, raw in snapshot:
            yield int(key), _decode(key, raw)

    def __len__(self) -> int:
        return len(self._data)

    def close(self) -> None:
        pass


class SQLiteMappingStore:
    """
    SQLite-backed store with one ``mappings`` table.

    The database runs in WAL mode with ``synchronous=FULL`` and every ``put``
    commits before returning, so an acknowledged mapping survives a crash.

    Parameters
    ----------
    path:
        Database file. Parent directories are created on demand.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self.path), check_same_thread=False)
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA synchronous=FULL")
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS mappings ("
                "id TEXT PRIMARY KEY, name BLOB NOT NULL)"
            )
            self._conn.commit()
        except (OSError, sqlite3.Error) as exc:
            raise StoreError(f"Unable to open mapping store at {self.path}: {exc}") from exc
        logger.debug("Opened mapping store at {}", self.path)

    def __enter__(self) -> "SQLiteMappingStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def get(self, mapping_id: int) -> str | None:
        key = str(mapping_id)
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT name FROM mappings WHERE id = ?", (key,)
                ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        if row is None:
            return None
        return _decode(key, row[0])

    def put(self, mapping_id: int, name: str) -> None:
        try:
            with self._lock, self._conn:
                self._conn.execute(
                    "INSERT INTO mappings (id, name) VALUES (?, ?) "
                    "ON CONFLICT(id) DO UPDATE SET name = excluded.name",
                    (str(mapping_id), sqlite3.Binary(name.encode("utf-8"))),
                )
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc

    def items(self) -> Iterator[tuple[int, str]]:
        try:
            with self._lock:
                rows = self._conn.execute("SELECT id, name FROM mappings").fetchall()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        for key, raw in rows:
            yield int(key), _decode(key, raw)

    def __len__(self) -> int:
        try:
            with self._lock:
                (count,) = self._conn.execute("SELECT COUNT(*) FROM mappings").fetchone()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        return int(count)

    def close(self) -> None:
        with self._lock:
            self._conn.close()
