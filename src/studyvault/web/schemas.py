"""Pydantic schemas for the StudyVault API.

Serialization models for users, books, subjects, and the page views
(dashboard, listing, reader, admin panel, sidebar).
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from studyvault.core.models import Book, Subject, User


# =============================================================================
# AUTH SCHEMAS
# =============================================================================


class LoginRequest(BaseModel):
    """Login form."""

    email: str = Field(..., min_length=1, max_length=200)
    password: str = Field(..., min_length=1)


class SignupRequest(BaseModel):
    """Signup form."""

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=1, max_length=200)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Current user."""

    id: str
    name: str
    email: str
    role: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, name=user.name, email=user.email, role=user.role.value)


class AuthResponse(BaseModel):
    """Login/signup outcome."""

    success: bool
    error: str | None = None
    user: UserResponse | None = None


# =============================================================================
# CATALOG SCHEMAS
# =============================================================================


class BookResponse(BaseModel):
    """A book card."""

    id: str
    title: str
    subject: str
    semester: int
    cover_image: str
    pdf_url: str
    author: str | None = None
    upload_date: str

    @classmethod
    def from_book(cls, book: Book) -> "BookResponse":
        return cls(
            id=book.id,
            title=book.title,
            subject=book.subject,
            semester=book.semester,
            cover_image=book.cover_image,
            pdf_url=book.pdf_url,
            author=book.author,
            upload_date=book.upload_date,
        )


class SubjectResponse(BaseModel):
    """A subject card on the dashboard."""

    id: str
    name: str
    semester: int
    book_count: int
    books: list[BookResponse]

    @classmethod
    def from_subject(cls, subject: Subject) -> "SubjectResponse":
        return cls(
            id=subject.id,
            name=subject.name,
            semester=subject.semester,
            book_count=len(subject.books),
            books=[BookResponse.from_book(b) for b in subject.books],
        )


class EmptyState(BaseModel):
    """Message shown in place of an empty list."""

    title: str = "No books available yet!"
    description: str = "Check back later for new additions to the library."


class DashboardResponse(BaseModel):
    """Dashboard page."""

    greeting: str
    selected_semester: int
    semesters: list[int]
    subjects: list[SubjectResponse]
    empty_state: EmptyState | None = None


class SemesterRequest(BaseModel):
    """Semester selector."""

    semester: int = Field(..., ge=1)


class BookListResponse(BaseModel):
    """Book listing page."""

    title: str
    books: list[BookResponse]
    count: int
    empty_state: EmptyState | None = None


# =============================================================================
# READER SCHEMAS
# =============================================================================


class ReaderResponse(BaseModel):
    """Reader page."""

    book: BookResponse
    pdf_url: str
    object_url: str | None = None
    download_filename: str


# =============================================================================
# ADMIN SCHEMAS
# =============================================================================


class AdminStats(BaseModel):
    """Admin panel counters."""

    total_books: int
    subjects: int


class AdminPanelResponse(BaseModel):
    """Admin panel with the filtered management list."""

    stats: AdminStats
    books: list[BookResponse]
    count: int
    connected: bool


class StoredFileResponse(BaseModel):
    """Local file store entry."""

    id: str
    filename: str
    size: int
    size_text: str
    uploaded_at: str


class StoredFileListResponse(BaseModel):
    files: list[StoredFileResponse]
    count: int


# =============================================================================
# SIDEBAR SCHEMAS
# =============================================================================


class NavLinkResponse(BaseModel):
    to: str
    label: str


class SidebarResponse(BaseModel):
    """Sidebar state and navigation."""

    is_open: bool
    is_mobile: bool
    links: list[NavLinkResponse]


class ViewportRequest(BaseModel):
    width: int = Field(..., ge=0)


# =============================================================================
# STATUS SCHEMAS
# =============================================================================


class StatusResponse(BaseModel):
    """Connection banner and auth gate."""

    connected: bool
    loading: bool
    signed_in: bool
    banner: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
