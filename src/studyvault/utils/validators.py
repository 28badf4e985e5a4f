"""Data validation helpers.

Functions:
- validate_email(email) -> bool: Basic email shape check
- validate_semester(semester, semesters) -> int: Range-checked semester
- is_direct_url(reference) -> bool: Book PDF reference is a URL, not a store key
- is_pdf(mime_type) -> bool: Upload is a PDF
"""

from __future__ import annotations

import re

from studyvault.exceptions import InvalidSemesterError

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

DIRECT_URL_PREFIXES = ("data:", "blob:", "http")

PDF_MIME_TYPE = "application/pdf"


def validate_email(email: str) -> bool:
    """Validate email format.

    Args:
        email: Email address to validate

    Returns:
        True if the address looks like user@domain.tld
    """
    return bool(email and EMAIL_PATTERN.match(email))


def validate_semester(semester: int, semesters: int = 8) -> int:
    """Check a semester number is within 1..semesters.

    Raises:
        InvalidSemesterError: If out of range
    """
    if not 1 <= semester <= semesters:
        raise InvalidSemesterError(semester, semesters)
    return semester


def is_direct_url(reference: str) -> bool:
    """True for data:, blob: and http(s) references."""
    return reference.startswith(DIRECT_URL_PREFIXES)


def is_pdf(mime_type: str | None) -> bool:
    """True when the upload declares the PDF mime type."""
    return mime_type == PDF_MIME_TYPE
