"""Tests for catalog view-model derivation (F4)."""

from studyvault.core.catalog import (
    books_for_subject,
    filter_books,
    group_subjects,
    subjects_for_semester,
)
from studyvault.core.models import Book, NewBook, Role, User


class TestGroupSubjects:
    """Tests for group_subjects()."""

    def test_empty(self):
        assert group_subjects([]) == []

    def test_groups_by_subject_and_semester(self, make_book):
        books = [
            make_book(title="Calculus", subject="Mathematics", semester=1),
            make_book(title="Physics I", subject="Physics", semester=1),
            make_book(title="Linear Algebra", subject="Mathematics", semester=1),
            make_book(title="Calculus II", subject="Mathematics", semester=2),
        ]

        subjects = group_subjects(books)

        assert [s.id for s in subjects] == ["Mathematics-1", "Physics-1", "Mathematics-2"]
        assert [b.title for b in subjects[0].books] == ["Calculus", "Linear Algebra"]

    def test_partition_covers_every_book_once(self, make_book):
        books = [
            make_book(subject=subject, semester=semester)
            for subject in ("Math", "Art", "History")
            for semester in (1, 2, 3)
            for _ in range(2)
        ]

        subjects = group_subjects(books)
        grouped = [b for s in subjects for b in s.books]

        assert sorted(b.id for b in grouped) == sorted(b.id for b in books)
        assert len({s.id for s in subjects}) == len(subjects) == 9
        for subject in subjects:
            assert all(
                b.subject == subject.name and b.semester == subject.semester
                for b in subject.books
            )

    def test_subjects_for_semester(self, make_book):
        subjects = group_subjects(
            [make_book(subject="Math", semester=1), make_book(subject="Art", semester=2)]
        )
        assert [s.name for s in subjects_for_semester(subjects, 2)] == ["Art"]
        assert subjects_for_semester(subjects, 5) == []


class TestFilters:
    """Tests for listing and admin filters."""

    def test_books_for_subject(self, make_book):
        books = [
            make_book(subject="Math", semester=1),
            make_book(subject="Math", semester=2),
            make_book(subject="Art", semester=1),
        ]
        result = books_for_subject(books, 1, "Math")
        assert [b.id for b in result] == [books[0].id]

    def test_search_is_case_insensitive(self, make_book):
        books = [
            make_book(title="Organic Chemistry", subject="Chemistry"),
            make_book(title="Calculus", subject="Mathematics", author="Stewart"),
        ]
        assert [b.title for b in filter_books(books, "chem")] == ["Organic Chemistry"]
        assert [b.title for b in filter_books(books, "STEWART")] == ["Calculus"]

    def test_search_and_semester(self, make_book):
        books = [
            make_book(title="Calculus", semester=1),
            make_book(title="Calculus II", semester=2),
        ]
        assert [b.title for b in filter_books(books, "calc", 2)] == ["Calculus II"]

    def test_no_filters_returns_all(self, make_book):
        books = [make_book(), make_book()]
        assert filter_books(books) == books


class TestModels:
    """Tests for row mapping."""

    def test_book_from_row(self):
        book = Book.from_row(
            {
                "id": 7,
                "title": "Calculus",
                "subject": "Mathematics",
                "semester": "3",
                "author": None,
                "cover_image_url": None,
                "pdf_url": "https://example.com/c.pdf",
                "created_at": "2024-05-01T12:00:00.123+00:00",
            },
            default_cover="https://example.com/default.jpg",
        )
        assert book.id == "7"
        assert book.semester == 3
        assert book.upload_date == "2024-05-01"
        assert book.cover_image == "https://example.com/default.jpg"

    def test_new_book_row(self):
        row = NewBook(
            title="Calculus",
            subject="Mathematics",
            semester=1,
            pdf_url="uploaded_1_abc",
            file_size=10,
        ).to_row(uploaded_by="u1", default_cover="https://example.com/default.jpg")

        assert row["uploaded_by"] == "u1"
        assert row["cover_image_url"] == "https://example.com/default.jpg"
        assert row["file_size"] == 10
        assert "file_path" not in row

    def test_user_from_profile_row(self):
        user = User.from_profile_row(
            {"id": "u1", "full_name": "Ana", "email": "a@b.co", "role": "superuser"}
        )
        assert user.role is Role.STUDENT
