"""Catalog view-model derivation.

Pure functions over a list of books: subject grouping and the filters the
dashboard, listing and admin pages apply.
"""

from __future__ import annotations

from studyvault.core.models import Book, Subject


def group_subjects(books: list[Book]) -> list[Subject]:
    """Partition books into Subject buckets keyed by subject and semester.

    Buckets appear in the order their first book appears; books keep
    their list order inside a bucket.
    """
    buckets: dict[str, Subject] = {}
    for book in books:
        key = Subject.key_for(book.subject, book.semester)
        bucket = buckets.get(key)
        if bucket is None:
            buckets[key] = Subject(
                id=key, name=book.subject, semester=book.semester, books=[book]
            )
        else:
            bucket.books.append(book)
    return list(buckets.values())


def subjects_for_semester(subjects: list[Subject], semester: int) -> list[Subject]:
    return [s for s in subjects if s.semester == semester]


def books_for_subject(books: list[Book], semester: int, subject: str) -> list[Book]:
    return [b for b in books if b.semester == semester and b.subject == subject]


def filter_books(
    books: list[Book], search: str = "", semester: int | None = None
) -> list[Book]:
    """Admin list filter: case-insensitive search over title, subject, author."""
    term = search.lower()

    def matches(book: Book) -> bool:
        if semester is not None and book.semester != semester:
            return False
        if not term:
            return True
        return (
            term in book.title.lower()
            or term in book.subject.lower()
            or (book.author is not None and term in book.author.lower())
        )

    return [b for b in books if matches(b)]
