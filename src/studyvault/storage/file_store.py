"""Local file store.

Fallback storage for uploaded PDFs when no remote bucket is available.
Raw bytes live in a single SQLite table keyed by a generated id; the id
is what ends up in a book's ``pdf_url``.

The schema is versioned through ``PRAGMA user_version`` and created on
first open.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

import structlog

from studyvault.storage.object_urls import ObjectUrlRegistry
from studyvault.utils.ids import generate_file_id

logger = structlog.get_logger(__name__)

SCHEMA_VERSION = 1


@dataclass
class StoredFile:
    """A file record with its bytes."""

    id: str
    filename: str
    mime_type: str
    size: int
    data: bytes
    uploaded_at: str


@dataclass
class StoredFileInfo:
    """File metadata without the bytes."""

    id: str
    filename: str
    size: int
    uploaded_at: str


class LocalFileStore:
    """Key-value store of raw file bytes."""

    def __init__(self, db_path: Path, object_urls: ObjectUrlRegistry):
        self.db_path = Path(db_path)
        self.object_urls = object_urls
        self._schema_ready = False

    @contextmanager
    def _connect(self) -> Generator[sqlite3.Connection, None, None]:
        """Open a connection, creating the schema on first use."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row

        try:
            if not self._schema_ready:
                _upgrade_schema(conn)
                self._schema_ready = True
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def store(self, filename: str, data: bytes, mime_type: str) -> str:
        """Persist raw bytes and return the generated key.

        Raises:
            sqlite3.Error: If the record could not be written
        """
        file_id = generate_file_id()
        logger.info("file_store.storing", filename=filename, size=len(data))

        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO files (id, filename, mime_type, size, data, uploaded_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    file_id,
                    filename,
                    mime_type,
                    len(data),
                    sqlite3.Binary(data),
                    datetime.now(timezone.utc).isoformat(),
                ),
            )

        logger.info("file_store.stored", file_id=file_id)
        return file_id

    def get(self, file_id: str) -> StoredFile | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM files WHERE id = ?", (file_id,)
            ).fetchone()

        if row is None:
            return None

        return StoredFile(
            id=row["id"],
            filename=row["filename"],
            mime_type=row["mime_type"],
            size=row["size"],
            data=bytes(row["data"]),
            uploaded_at=row["uploaded_at"],
        )

    def resolve(self, file_id: str) -> str:
        """Return a new object URL for the file, or "" if it is absent.

        The caller owns the returned URL and must revoke it.
        """
        stored = self.get(file_id)
        if stored is None:
            logger.warning("file_store.not_found", file_id=file_id)
            return ""

        url = self.object_urls.create(stored.data, stored.mime_type)
        logger.debug("file_store.resolved", file_id=file_id)
        return url

    def delete(self, file_id: str) -> bool:
        """Delete a file. Returns True if a record was removed."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM files WHERE id = ?", (file_id,))

        deleted = cursor.rowcount > 0
        if deleted:
            logger.info("file_store.deleted", file_id=file_id)
        return deleted

    def list(self) -> list[StoredFileInfo]:
        """Metadata for every stored file."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, filename, size, uploaded_at FROM files ORDER BY uploaded_at"
            ).fetchall()

        return [
            StoredFileInfo(
                id=row["id"],
                filename=row["filename"],
                size=row["size"],
                uploaded_at=row["uploaded_at"],
            )
            for row in rows
        ]

    def find_by_filename(self, filename: str) -> list[StoredFileInfo]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, filename, size, uploaded_at FROM files WHERE filename = ?",
                (filename,),
            ).fetchall()

        return [
            StoredFileInfo(
                id=row["id"],
                filename=row["filename"],
                size=row["size"],
                uploaded_at=row["uploaded_at"],
            )
            for row in rows
        ]


def schema_version(conn: sqlite3.Connection) -> int:
    return conn.execute("PRAGMA user_version").fetchone()[0]


def _upgrade_schema(conn: sqlite3.Connection) -> None:
    """Bring the database up to SCHEMA_VERSION."""
    version = schema_version(conn)
    if version >= SCHEMA_VERSION:
        return

    if version < 1:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS files (
                id TEXT PRIMARY KEY,
                filename TEXT NOT NULL,
                mime_type TEXT NOT NULL,
                size INTEGER NOT NULL,
                data BLOB NOT NULL,
                uploaded_at TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_files_filename ON files(filename);
            """
        )

    conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
    logger.info("file_store.schema_created", version=SCHEMA_VERSION)


@contextmanager
def scoped_url(store: LocalFileStore, file_id: str) -> Generator[str, None, None]:
    """Resolve a stored file to an object URL that is revoked on exit.

    Yields "" when the file is absent.
    """
    url = store.resolve(file_id)
    try:
        yield url
    finally:
        if url:
            store.object_urls.revoke(url)
