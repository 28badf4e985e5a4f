"""View models shared by the state containers.

Rows from the backend (snake_case columns) are mapped here into the
shapes the pages consume.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from studyvault.config.app_config import DEFAULT_COVER_IMAGE


class Role(str, Enum):
    """User roles."""

    STUDENT = "student"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: Any) -> "Role":
        """Role from a stored value; anything unknown is a student."""
        return cls.ADMIN if value == cls.ADMIN.value else cls.STUDENT


@dataclass
class User:
    """Application user, derived from the profile row."""

    id: str
    name: str
    email: str
    role: Role = Role.STUDENT

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @classmethod
    def from_profile_row(cls, row: dict[str, Any]) -> "User":
        return cls(
            id=str(row["id"]),
            name=row.get("full_name") or "",
            email=row.get("email") or "",
            role=Role.parse(row.get("role")),
        )


@dataclass
class Book:
    """A textbook in the catalog."""

    id: str
    title: str
    subject: str
    semester: int
    cover_image: str
    pdf_url: str
    upload_date: str
    author: str | None = None

    @classmethod
    def from_row(
        cls, row: dict[str, Any], default_cover: str = DEFAULT_COVER_IMAGE
    ) -> "Book":
        """Map a books row. upload_date is the date part of created_at."""
        created_at = row.get("created_at") or ""
        return cls(
            id=str(row["id"]),
            title=row["title"],
            subject=row["subject"],
            semester=int(row["semester"]),
            author=row.get("author"),
            cover_image=row.get("cover_image_url") or default_cover,
            pdf_url=row.get("pdf_url") or "",
            upload_date=created_at.split("T")[0],
        )


@dataclass
class NewBook:
    """Fields an admin supplies when adding a book."""

    title: str
    subject: str
    semester: int
    pdf_url: str
    cover_image: str = ""
    author: str | None = None
    file_path: str | None = None
    file_size: int | None = None

    def to_row(self, uploaded_by: str, default_cover: str = DEFAULT_COVER_IMAGE) -> dict[str, Any]:
        row: dict[str, Any] = {
            "title": self.title,
            "subject": self.subject,
            "semester": self.semester,
            "author": self.author,
            "cover_image_url": self.cover_image or default_cover,
            "pdf_url": self.pdf_url,
            "uploaded_by": uploaded_by,
        }
        if self.file_path is not None:
            row["file_path"] = self.file_path
        if self.file_size is not None:
            row["file_size"] = self.file_size
        return row


@dataclass
class Subject:
    """Books grouped by (subject, semester). Derived, never stored."""

    id: str
    name: str
    semester: int
    books: list[Book]

    @staticmethod
    def key_for(subject: str, semester: int) -> str:
        return f"{subject}-{semester}"
