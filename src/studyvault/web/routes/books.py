"""Book listing endpoints."""

from fastapi import APIRouter, Depends

from studyvault.core.models import Book, User
from studyvault.web.context import AppContext
from studyvault.web.dependencies import get_context, require_user
from studyvault.web.schemas import BookListResponse, BookResponse, EmptyState

router = APIRouter(tags=["books"])


def _listing(title: str, books: list[Book]) -> BookListResponse:
    empty_state = None
    if not books:
        empty_state = EmptyState(
            description=(
                "Books for this subject haven't been added yet. "
                "Please check back later."
            ),
        )
    return BookListResponse(
        title=title,
        books=[BookResponse.from_book(b) for b in books],
        count=len(books),
        empty_state=empty_state,
    )


@router.get("/books", response_model=BookListResponse)
async def list_books(
    ctx: AppContext = Depends(get_context),
    user: User = Depends(require_user),
) -> BookListResponse:
    """Every book in the catalog."""
    return _listing("My Books", ctx.catalog.books)


@router.get("/books/{semester}/{subject}", response_model=BookListResponse)
async def list_subject_books(
    semester: int,
    subject: str,
    ctx: AppContext = Depends(get_context),
    user: User = Depends(require_user),
) -> BookListResponse:
    """Books of one subject in one semester."""
    return _listing(
        f"{subject} - Semester {semester}",
        ctx.catalog.books_for_subject(semester, subject),
    )


@router.get("/api/books/{book_id}", response_model=BookResponse)
async def get_book(
    book_id: str,
    ctx: AppContext = Depends(get_context),
    user: User = Depends(require_user),
) -> BookResponse:
    """A single book (404 when not in the catalog)."""
    return BookResponse.from_book(ctx.catalog.get_book(book_id))
