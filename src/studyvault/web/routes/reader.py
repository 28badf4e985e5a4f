"""Reader endpoints and object URL access."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response, status

from studyvault.core.models import User
from studyvault.storage.object_urls import ObjectUrlRegistry
from studyvault.web.context import AppContext
from studyvault.web.dependencies import get_context, require_user
from studyvault.web.schemas import BookResponse, ReaderResponse

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["reader"])

BLOB_ROUTE = "/api/blobs/{token}"


def blob_path(object_url: str) -> str:
    return BLOB_ROUTE.format(token=ObjectUrlRegistry.token_of(object_url))


@router.get("/reader/{book_id}", response_model=ReaderResponse)
async def open_reader(
    book_id: str,
    ctx: AppContext = Depends(get_context),
    user: User = Depends(require_user),
) -> ReaderResponse:
    """Resolve a book's PDF for reading.

    Reopening a book revokes the object URL issued the previous time.
    """
    book = ctx.catalog.get_book(book_id)
    source = ctx.reader.open(book)

    return ReaderResponse(
        book=BookResponse.from_book(book),
        pdf_url=blob_path(source.url) if source.owned else source.url,
        object_url=source.url if source.owned else None,
        download_filename=source.download_filename,
    )


@router.delete("/reader/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_reader(
    book_id: str,
    ctx: AppContext = Depends(get_context),
    user: User = Depends(require_user),
) -> None:
    """Release the reader's object URL for a book."""
    ctx.reader.release(book_id)


@router.get(BLOB_ROUTE)
async def get_blob(
    token: str,
    ctx: AppContext = Depends(get_context),
    user: User = Depends(require_user),
) -> Response:
    """Bytes behind a live object URL."""
    entry = ctx.object_urls.get(token)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="PDF file not found in storage",
        )
    return Response(content=entry.data, media_type=entry.mime_type)


@router.delete(BLOB_ROUTE, status_code=status.HTTP_204_NO_CONTENT)
async def revoke_blob(
    token: str,
    ctx: AppContext = Depends(get_context),
    user: User = Depends(require_user),
) -> None:
    """Revoke an object URL."""
    if not ctx.object_urls.revoke(token):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Object URL not found",
        )
