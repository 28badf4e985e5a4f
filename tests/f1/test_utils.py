"""Tests for id generation and validators (F1)."""

import re

import pytest

from studyvault.exceptions import InvalidSemesterError
from studyvault.utils.ids import generate_file_id, generate_object_name, random_base36
from studyvault.utils.validators import (
    is_direct_url,
    is_pdf,
    validate_email,
    validate_semester,
)


class TestIds:
    """Tests for generated identifiers."""

    def test_random_base36_charset(self):
        value = random_base36()
        assert len(value) == 11
        assert re.fullmatch(r"[0-9a-z]+", value)

    def test_file_id_format(self):
        assert re.fullmatch(r"uploaded_\d+_[0-9a-z]{11}", generate_file_id())

    def test_object_name_keeps_extension(self):
        assert re.fullmatch(r"\d+-[0-9a-z]{11}\.pdf", generate_object_name("Book.pdf"))

    def test_object_name_without_extension(self):
        assert generate_object_name("book").endswith(".pdf")


class TestValidators:
    """Tests for validators."""

    @pytest.mark.parametrize("email", ["a@b.co", "admin@example.com"])
    def test_valid_emails(self, email):
        assert validate_email(email)

    @pytest.mark.parametrize("email", ["", "no-at-sign", "a@b", "a b@c.com"])
    def test_invalid_emails(self, email):
        assert not validate_email(email)

    def test_semester_in_range(self):
        assert validate_semester(1) == 1
        assert validate_semester(8) == 8

    @pytest.mark.parametrize("semester", [0, 9, -1])
    def test_semester_out_of_range(self, semester):
        with pytest.raises(InvalidSemesterError, match="between 1 and 8"):
            validate_semester(semester)

    def test_semester_uses_configured_count(self):
        assert validate_semester(10, semesters=10) == 10
        with pytest.raises(InvalidSemesterError) as exc_info:
            validate_semester(7, semesters=6)
        assert exc_info.value.kind == "invalid_semester"

    @pytest.mark.parametrize(
        "reference",
        [
            "https://x.supabase.co/storage/v1/object/public/books/a.pdf",
            "http://example.com/a.pdf",
            "data:application/pdf;base64,AAAA",
            "blob:studyvault/abc",
        ],
    )
    def test_direct_urls(self, reference):
        assert is_direct_url(reference)

    def test_store_key_is_not_direct_url(self):
        assert not is_direct_url("uploaded_1700000000000_abc123def45")

    def test_is_pdf(self):
        assert is_pdf("application/pdf")
        assert not is_pdf("text/plain")
        assert not is_pdf(None)
