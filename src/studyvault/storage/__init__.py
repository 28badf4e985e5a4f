"""Local storage module.

Provides:
- LocalFileStore: SQLite-backed fallback store for PDF bytes
- ObjectUrlRegistry: transient URLs handed to the reader
"""

from studyvault.storage.file_store import (
    LocalFileStore,
    StoredFile,
    StoredFileInfo,
    scoped_url,
)
from studyvault.storage.object_urls import ObjectUrlRegistry

__all__ = [
    "LocalFileStore",
    "ObjectUrlRegistry",
    "StoredFile",
    "StoredFileInfo",
    "scoped_url",
]
