"""Book upload orchestration.

Validates the PDF, pushes the bytes to the ``books`` bucket (or to the
local file store when no bucket is configured) and records the book in
the catalog.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from studyvault.backend.base import BackendClient
from studyvault.config.app_config import AppConfig
from studyvault.core.catalog_state import CatalogState
from studyvault.core.models import Book, NewBook
from studyvault.exceptions import (
    ConfigurationMissingError,
    FileTooLargeError,
    InvalidFileTypeError,
    NotLoggedInError,
    StorageError,
)
from studyvault.storage.file_store import LocalFileStore
from studyvault.utils.ids import generate_object_name
from studyvault.utils.validators import is_pdf, validate_semester

logger = structlog.get_logger(__name__)

MAX_FILE_SIZE = 200 * 1024 * 1024  # 200MB

SIZE_UNITS = ("Bytes", "KB", "MB", "GB")

MSG_BUCKET_MISSING = (
    'Storage bucket not found. Please ensure your Supabase project is properly '
    'configured with a "books" storage bucket.'
)


def format_file_size(size: int) -> str:
    """Human-readable size in base-1024 units, at most two decimals."""
    if size == 0:
        return "0 Bytes"

    index = 0
    while index < len(SIZE_UNITS) - 1 and size >= 1024 ** (index + 1):
        index += 1

    value = f"{size / 1024 ** index:.2f}".rstrip("0").rstrip(".")
    return f"{value} {SIZE_UNITS[index]}"


def validate_pdf_upload(
    filename: str, mime_type: str | None, size: int, limit: int = MAX_FILE_SIZE
) -> None:
    """Reject non-PDF files and files above the size limit.

    Raises:
        InvalidFileTypeError: The file is not declared as a PDF
        FileTooLargeError: The file is larger than ``limit`` bytes
    """
    if not is_pdf(mime_type):
        raise InvalidFileTypeError(filename, mime_type)

    validate_upload_size(size, limit)


def validate_upload_size(size: int, limit: int = MAX_FILE_SIZE) -> None:
    if size > limit:
        raise FileTooLargeError(
            size=size,
            limit=limit,
            size_text=format_file_size(size),
            limit_text=format_file_size(limit),
        )


@dataclass
class UploadForm:
    """Upload form fields."""

    title: str
    subject: str
    semester: int = 1
    author: str | None = None
    cover_image: str = ""


class BookUploader:
    """Admin upload flow."""

    def __init__(
        self,
        backend: BackendClient,
        catalog: CatalogState,
        file_store: LocalFileStore,
        config: AppConfig,
    ):
        self._backend = backend
        self._catalog = catalog
        self._file_store = file_store
        self._config = config

    @property
    def remote_storage_available(self) -> bool:
        return self._backend.is_connected and bool(self._config.backend.books_bucket)

    async def _upload_remote(
        self, filename: str, data: bytes, mime_type: str
    ) -> tuple[str, str]:
        """Upload to the bucket; returns (public URL, object path)."""
        bucket = self._config.backend.books_bucket
        path = generate_object_name(filename)

        result = await self._backend.upload_file(bucket, path, data, mime_type)
        if not result.ok:
            message = result.error.message
            logger.error("upload.storage_failed", path=path, error=message)
            if "not found" in message or "bucket" in message:
                raise StorageError(MSG_BUCKET_MISSING, code=result.error.code)
            raise StorageError(
                f"Failed to upload PDF file: {message}", code=result.error.code
            )

        stored_path = result.data or path
        logger.info("upload.stored_remote", path=stored_path)
        public_url = self._backend.get_public_url(bucket, stored_path)
        return public_url, stored_path

    async def upload(
        self, form: UploadForm, filename: str, data: bytes, mime_type: str
    ) -> Book:
        """Validate, store and register a PDF.

        Raises:
            ConfigurationMissingError: No backend credentials
            NotLoggedInError: No signed-in user
            UploadValidationError: Wrong type or too large
            InvalidSemesterError: Semester outside the configured range
            StorageError: The bucket rejected the file
            PermissionDeniedError, BackendRequestError: From the catalog insert;
                a file written to the local store is removed again
        """
        if not self._backend.is_connected:
            raise ConfigurationMissingError()

        if self._catalog.user is None:
            raise NotLoggedInError("upload books")

        validate_pdf_upload(
            filename, mime_type, len(data), self._config.storage.max_upload_bytes
        )
        validate_semester(form.semester, self._config.ui.semesters)

        file_path: str | None = None
        local_id: str | None = None
        if self.remote_storage_available:
            pdf_url, file_path = await self._upload_remote(filename, data, mime_type)
        elif self._config.storage.local_fallback:
            pdf_url = local_id = self._file_store.store(filename, data, mime_type)
            logger.info("upload.stored_local", file_id=pdf_url)
        else:
            raise StorageError("No storage is configured for PDF files")

        try:
            book = await self._catalog.add_book(
                NewBook(
                    title=form.title,
                    subject=form.subject,
                    semester=form.semester,
                    author=form.author or None,
                    cover_image=form.cover_image or self._config.ui.default_cover_image,
                    pdf_url=pdf_url,
                    file_path=file_path,
                    file_size=len(data),
                )
            )
        except Exception:
            if local_id is not None:
                self._file_store.delete(local_id)
                logger.warning("upload.local_file_removed", file_id=local_id)
            raise
        logger.info("upload.completed", book_id=book.id, size=format_file_size(len(data)))
        return book
