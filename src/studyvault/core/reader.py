"""PDF reference resolution for the reader.

A book's ``pdf_url`` is either a direct URL (http, data:, blob:) or a
local file store key. Keys are resolved to a fresh object URL that the
reader owns; ReaderSession revokes it when the same book is reopened or
the session is closed.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from studyvault.core.models import Book
from studyvault.exceptions import PdfNotFoundError, ReaderError
from studyvault.storage.file_store import LocalFileStore
from studyvault.storage.object_urls import ObjectUrlRegistry
from studyvault.utils.validators import is_direct_url

logger = structlog.get_logger(__name__)


@dataclass
class ReaderSource:
    """Resolved PDF location for one book."""

    book: Book
    url: str
    owned: bool = False
    _registry: ObjectUrlRegistry | None = field(default=None, repr=False)

    @property
    def download_filename(self) -> str:
        return f"{self.book.title}.pdf"

    def release(self) -> None:
        """Revoke the object URL if this source created one."""
        if self.owned and self._registry is not None:
            self._registry.revoke(self.url)
            self.owned = False


def resolve_pdf(book: Book, file_store: LocalFileStore) -> ReaderSource:
    """Resolve a book's PDF reference.

    Raises:
        PdfNotFoundError: No reference, or the store has no such file
        ReaderError: The store could not be read
    """
    if not book.pdf_url:
        raise PdfNotFoundError("PDF file not found")

    if is_direct_url(book.pdf_url):
        return ReaderSource(book=book, url=book.pdf_url)

    try:
        url = file_store.resolve(book.pdf_url)
    except Exception as exc:
        logger.error("reader.load_failed", book_id=book.id, error=str(exc))
        raise ReaderError("Failed to load PDF file") from exc

    if not url:
        raise PdfNotFoundError("PDF file not found in storage")

    return ReaderSource(
        book=book, url=url, owned=True, _registry=file_store.object_urls
    )


class ReaderSession:
    """Tracks the object URL currently held per open book."""

    def __init__(self, file_store: LocalFileStore):
        self._file_store = file_store
        self._open: dict[str, ReaderSource] = {}

    def open(self, book: Book) -> ReaderSource:
        """Resolve the book, revoking the URL from its previous opening."""
        self.release(book.id)
        source = resolve_pdf(book, self._file_store)
        if source.owned:
            self._open[book.id] = source
        logger.info("reader.opened", book_id=book.id, owned=source.owned)
        return source

    def release(self, book_id: str) -> None:
        source = self._open.pop(book_id, None)
        if source is not None:
            source.release()

    def close(self) -> None:
        for book_id in list(self._open):
            self.release(book_id)

    def __len__(self) -> int:
        return len(self._open)
