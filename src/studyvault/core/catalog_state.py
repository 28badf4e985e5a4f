"""Catalog state container.

Sole owner of the book list and the derived subject buckets. Loads from
the backend when a user signs in; add/delete write to the backend first
and update the local list on success. Subjects are rebuilt in full after
every change.
"""

from __future__ import annotations

import structlog

from studyvault.backend.base import BackendClient
from studyvault.config.app_config import DEFAULT_COVER_IMAGE
from studyvault.core.catalog import (
    books_for_subject,
    filter_books,
    group_subjects,
    subjects_for_semester,
)
from studyvault.core.models import Book, NewBook, Subject, User
from studyvault.exceptions import (
    BackendRequestError,
    BookNotFoundError,
    NotLoggedInError,
    PermissionDeniedError,
)
from studyvault.utils.validators import validate_semester

logger = structlog.get_logger(__name__)

MSG_PERMISSION_DENIED = (
    "Permission denied: You may not have the required permissions to upload "
    "books. Please log out and log back in, or contact an administrator."
)


class CatalogState:
    """Books and subject groupings for the signed-in user."""

    def __init__(
        self,
        backend: BackendClient,
        default_cover: str = DEFAULT_COVER_IMAGE,
        semesters: int = 8,
    ):
        self._backend = backend
        self._default_cover = default_cover
        self._semesters = semesters
        self.books: list[Book] = []
        self.subjects: list[Subject] = []
        self.selected_semester = 1
        self.user: User | None = None

    def _set_books(self, books: list[Book]) -> None:
        self.books = books
        self.subjects = group_subjects(books)

    async def on_user_changed(self, previous: User | None, current: User | None) -> None:
        """Auth listener: load on sign-in, reset on sign-out."""
        self.user = current
        if current is None:
            if previous is not None:
                self.reset()
        elif previous is None:
            await self.load_books()

    def reset(self) -> None:
        self._set_books([])
        self.selected_semester = 1
        logger.info("catalog.reset")

    async def load_books(self) -> None:
        """Fetch all books, newest first. Failures keep the current list."""
        try:
            result = await self._backend.fetch_books()
        except Exception as exc:
            logger.error("catalog.load_error", error=str(exc))
            return

        if not result.ok:
            logger.error("catalog.load_failed", error=result.error.message)
            return

        books = [Book.from_row(row, self._default_cover) for row in result.data or []]
        self._set_books(books)
        logger.info("catalog.books_loaded", count=len(books), subjects=len(self.subjects))

    async def _ensure_profile_row(self, user: User) -> None:
        """Create the uploader's users row if it is missing; failures are tolerated."""
        check = await self._backend.fetch_profile(user.id, columns="id, role")

        if check.ok and check.data:
            logger.debug("catalog.profile_verified", user_id=user.id)
            return

        if check.error is not None and check.error.is_not_found:
            logger.info("catalog.profile_missing", user_id=user.id)
            created = await self._backend.insert_profile(
                {
                    "id": user.id,
                    "full_name": user.name,
                    "email": user.email,
                    "role": user.role.value,
                }
            )
            if not created.ok:
                logger.warning(
                    "catalog.profile_create_failed",
                    user_id=user.id,
                    error=created.error.message,
                )
            return

        logger.warning(
            "catalog.profile_check_unexpected",
            user_id=user.id,
            error=check.error.message if check.error else "empty row",
        )

    async def add_book(self, data: NewBook) -> Book:
        """Insert a book uploaded by the current user and prepend it locally.

        Raises:
            NotLoggedInError: No user is signed in
            PermissionDeniedError: A row-level policy rejected the insert
            BackendRequestError: Any other backend failure
        """
        user = self.user
        if user is None:
            raise NotLoggedInError("add books")

        validate_semester(data.semester, self._semesters)
        logger.info("catalog.adding_book", title=data.title, user_id=user.id)

        await self._ensure_profile_row(user)

        result = await self._backend.insert_book(
            data.to_row(uploaded_by=user.id, default_cover=self._default_cover)
        )

        if not result.ok:
            error = result.error
            logger.error(
                "catalog.add_failed",
                code=error.code,
                message=error.message,
                details=error.details,
                hint=error.hint,
            )
            if error.is_row_level_security:
                raise PermissionDeniedError(MSG_PERMISSION_DENIED)
            raise BackendRequestError(error.message, code=error.code)

        if not result.data:
            raise BackendRequestError("Book insert returned no row")

        book = Book.from_row(result.data, self._default_cover)
        self._set_books([book, *self.books])
        logger.info("catalog.book_added", book_id=book.id)
        return book

    async def delete_book(self, book_id: str) -> None:
        """Delete a book by id and drop it from the local list.

        Raises:
            BackendRequestError: The backend rejected the delete
        """
        result = await self._backend.delete_book(book_id)
        if not result.ok:
            logger.error("catalog.delete_failed", book_id=book_id, error=result.error.message)
            raise BackendRequestError(result.error.message, code=result.error.code)

        self._set_books([b for b in self.books if b.id != book_id])
        logger.info("catalog.book_deleted", book_id=book_id)

    # -- view-model queries ---------------------------------------------------

    def select_semester(self, semester: int) -> int:
        self.selected_semester = validate_semester(semester, self._semesters)
        return self.selected_semester

    def subjects_for_semester(self, semester: int | None = None) -> list[Subject]:
        return subjects_for_semester(
            self.subjects, semester if semester is not None else self.selected_semester
        )

    def books_for_subject(self, semester: int, subject: str) -> list[Book]:
        return books_for_subject(self.books, semester, subject)

    def filter_books(self, search: str = "", semester: int | None = None) -> list[Book]:
        return filter_books(self.books, search, semester)

    def get_book(self, book_id: str) -> Book:
        """Book by id.

        Raises:
            BookNotFoundError: If the id is not in the catalog
        """
        for book in self.books:
            if book.id == book_id:
                return book
        raise BookNotFoundError(book_id)
