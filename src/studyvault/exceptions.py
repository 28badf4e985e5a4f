"""Exception taxonomy for StudyVault.

Every error raised by the state containers derives from StudyVaultError so
the web layer can map it to a response in one place. Expected backend
failures (bad login, missing row) never reach here: the backend client
returns them as BackendResult errors instead.
"""

from __future__ import annotations


class StudyVaultError(Exception):
    """Base exception for StudyVault errors."""

    kind = "unexpected"


class ConfigurationMissingError(StudyVaultError):
    """Raised when an operation needs backend credentials that are not set."""

    kind = "configuration_missing"

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or 'Supabase is not connected. Please click "Connect to Supabase" '
            "in the top right corner."
        )


class AuthenticationError(StudyVaultError):
    """Raised when a route needs a signed-in user and there is none."""

    kind = "authentication"


class NotLoggedInError(AuthenticationError):
    """Raised when a catalog mutation is attempted without a user."""

    def __init__(self, action: str = "add books"):
        self.action = action
        super().__init__(f"User must be logged in to {action}")


class PermissionDeniedError(StudyVaultError):
    """Raised when a row-level policy (or role check) rejects a write."""

    kind = "permission_denied"


class BackendRequestError(StudyVaultError):
    """Raised when a backend call fails for an unexpected reason."""

    kind = "backend"

    def __init__(self, message: str, code: str | None = None):
        self.code = code
        super().__init__(message)


class StorageError(BackendRequestError):
    """Raised when object storage rejects an upload."""

    kind = "storage"


class NotFoundError(StudyVaultError):
    """Base for resources that do not exist."""

    kind = "not_found"


class BookNotFoundError(NotFoundError):
    """Raised when a book id is not in the catalog."""

    def __init__(self, book_id: str):
        self.book_id = book_id
        super().__init__(f"Book '{book_id}' not found")


class PdfNotFoundError(NotFoundError):
    """Raised when a book's PDF reference cannot be resolved."""


class ReaderError(StudyVaultError):
    """Raised when the PDF could not be loaded for another reason."""

    kind = "reader"


class UploadValidationError(StudyVaultError):
    """Base for client-side upload rejections."""

    kind = "upload_invalid"


class InvalidFileTypeError(UploadValidationError):
    """Raised when the uploaded file is not a PDF."""

    def __init__(self, filename: str, mime_type: str | None = None):
        self.filename = filename
        self.mime_type = mime_type
        super().__init__("Please select a valid PDF file")


class FileTooLargeError(UploadValidationError):
    """Raised when the uploaded file exceeds the size limit."""

    kind = "upload_too_large"

    def __init__(self, size: int, limit: int, size_text: str, limit_text: str):
        self.size = size
        self.limit = limit
        super().__init__(
            f"File size ({size_text}) exceeds max limit of {limit_text}"
        )


class InvalidSemesterError(StudyVaultError):
    """Raised when a semester number is outside the configured range."""

    kind = "invalid_semester"

    def __init__(self, semester: int, semesters: int):
        self.semester = semester
        self.semesters = semesters
        super().__init__(f"Semester must be between 1 and {semesters}, got {semester}")
