"""SQLite-backed local blob store."""

import asyncio
import re
import sqlite3
from collections.abc import Iterator
from contextlib import closing, contextmanager
from dataclasses import dataclass
from pathlib import Path

from portfolio_site.domain.errors import StoreError
from portfolio_site.domain.photos import StoredBlob
from portfolio_site.services.blob_store import BlobStore

DEFAULT_DB_NAME = "portfolio-db"
DEFAULT_TABLE = "photos"

_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass
class SqliteBlobStore(BlobStore):
    """Blob store keeping one row per key in a local SQLite file."""

    path: Path
    table: str = DEFAULT_TABLE

    def __post_init__(self) -> None:
        if not _TABLE_NAME.match(self.table):
            raise ValueError(f"Invalid table name: {self.table!r}")

    @classmethod
    def create(
        cls, directory: Path, db_name: str = DEFAULT_DB_NAME
    ) -> "SqliteBlobStore":
        """Create a store in directory, making the directory if needed."""
        directory.mkdir(parents=True, exist_ok=True)
        return cls(path=directory / f"{db_name}.sqlite3")

    async def put(self, key: str, blob: StoredBlob) -> None:
        """Upsert the blob in a single transaction."""
        await asyncio.to_thread(self._put, key, blob)

    async def get(self, key: str) -> StoredBlob | None:
        """Return the stored blob, or None when the key is absent."""
        return await asyncio.to_thread(self._get, key)

    async def delete(self, key: str) -> None:
        """Delete the row for key if it exists."""
        await asyncio.to_thread(self._delete, key)

    def _put(self, key: str, blob: StoredBlob) -> None:
        with self._connect() as conn, conn:
            conn.execute(
                f"INSERT INTO {self.table} (key, data, media_type) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET "
                "data = excluded.data, media_type = excluded.media_type",
                (key, sqlite3.Binary(blob.data), blob.media_type),
            )

    def _get(self, key: str) -> StoredBlob | None:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT data, media_type FROM {self.table} WHERE key = ?", (key,)
            ).fetchone()
        if row is None:
            return None
        return StoredBlob(data=bytes(row[0]), media_type=row[1])

    def _delete(self, key: str) -> None:
        with self._connect() as conn, conn:
            conn.execute(f"DELETE FROM {self.table} WHERE key = ?", (key,))

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection for one operation and always close it."""
        try:
            with closing(sqlite3.connect(self.path)) as conn:
                conn.execute(
                    f"CREATE TABLE IF NOT EXISTS {self.table} ("
                    "key TEXT PRIMARY KEY, data BLOB NOT NULL, "
                    "media_type TEXT NOT NULL)"
                )
                yield conn
        except sqlite3.Error as exc:
            raise StoreError(f"Blob store operation failed: {exc}") from exc
