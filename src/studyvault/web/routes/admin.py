"""Admin panel endpoints (upload, manage, local files)."""

import structlog
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from studyvault.core.models import User
from studyvault.core.uploads import UploadForm, format_file_size, validate_upload_size
from studyvault.web.context import AppContext
from studyvault.web.dependencies import get_context, require_admin
from studyvault.web.schemas import (
    AdminPanelResponse,
    AdminStats,
    BookResponse,
    StoredFileListResponse,
    StoredFileResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["admin"])


@router.get("/admin", response_model=AdminPanelResponse)
async def admin_panel(
    search: str = "",
    semester: int | None = None,
    ctx: AppContext = Depends(get_context),
    user: User = Depends(require_admin),
) -> AdminPanelResponse:
    """Stats and the book management list, filtered by search and semester."""
    books = ctx.catalog.filter_books(search, semester)
    return AdminPanelResponse(
        stats=AdminStats(
            total_books=len(ctx.catalog.books),
            subjects=len(ctx.catalog.subjects),
        ),
        books=[BookResponse.from_book(b) for b in books],
        count=len(books),
        connected=ctx.is_connected,
    )


@router.post(
    "/api/admin/books",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_book(
    file: UploadFile = File(...),
    title: str = Form(..., min_length=1),
    subject: str = Form(..., min_length=1),
    semester: int = Form(1, ge=1),
    author: str = Form(""),
    cover_image: str = Form(""),
    ctx: AppContext = Depends(get_context),
    user: User = Depends(require_admin),
) -> BookResponse:
    """Upload a PDF and add it to the catalog."""
    if file.size is not None:
        validate_upload_size(file.size, ctx.config.storage.max_upload_bytes)
    data = await file.read()
    logger.info(
        "admin.upload_requested",
        filename=file.filename,
        size=format_file_size(len(data)),
        user_id=user.id,
    )

    book = await ctx.uploader.upload(
        UploadForm(
            title=title,
            subject=subject,
            semester=semester,
            author=author or None,
            cover_image=cover_image,
        ),
        filename=file.filename or "book.pdf",
        data=data,
        mime_type=file.content_type or "",
    )
    return BookResponse.from_book(book)


@router.delete("/api/admin/books/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(
    book_id: str,
    ctx: AppContext = Depends(get_context),
    user: User = Depends(require_admin),
) -> None:
    """Delete a book."""
    ctx.reader.release(book_id)
    await ctx.catalog.delete_book(book_id)


@router.get("/api/admin/files", response_model=StoredFileListResponse)
async def list_files(
    ctx: AppContext = Depends(get_context),
    user: User = Depends(require_admin),
) -> StoredFileListResponse:
    """Files held in the local fallback store."""
    files = [
        StoredFileResponse(
            id=f.id,
            filename=f.filename,
            size=f.size,
            size_text=format_file_size(f.size),
            uploaded_at=f.uploaded_at,
        )
        for f in ctx.file_store.list()
    ]
    return StoredFileListResponse(files=files, count=len(files))


@router.delete("/api/admin/files/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file(
    file_id: str,
    ctx: AppContext = Depends(get_context),
    user: User = Depends(require_admin),
) -> None:
    """Delete a file from the local store."""
    if not ctx.file_store.delete(file_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"File '{file_id}' not found",
        )
