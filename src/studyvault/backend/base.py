"""Backend client interface.

The backend-as-a-service provides three capabilities: authentication,
relational rows (``users`` and ``books`` tables) and object storage (the
``books`` bucket). BackendClient is the seam between StudyVault and that
service. Two implementations exist: SupabaseBackend talks to a real
project, DisconnectedBackend answers every call with a "not connected"
error when no credentials are configured.

Methods never raise for expected failures. They return a BackendResult
whose ``error`` is set instead.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

# PostgREST code for ".single()" matching zero rows
NOT_FOUND_CODE = "PGRST116"

NOT_CONNECTED_MESSAGE = "Please connect to Supabase first"

# Error kinds
KIND_NOT_CONNECTED = "not_connected"
KIND_NOT_FOUND = "not_found"
KIND_AUTH = "auth"
KIND_PERMISSION = "permission"
KIND_STORAGE = "storage"
KIND_REQUEST = "request"


@dataclass
class BackendError:
    """Error reported by the backend for a single call."""

    message: str
    code: str | None = None
    kind: str = KIND_REQUEST
    details: str | None = None
    hint: str | None = None

    @property
    def is_not_found(self) -> bool:
        return self.kind == KIND_NOT_FOUND or self.code == NOT_FOUND_CODE

    @property
    def is_row_level_security(self) -> bool:
        return "row-level security policy" in self.message


@dataclass
class BackendResult:
    """Tagged success/error shape returned by every backend call."""

    data: Any = None
    error: BackendError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: Any = None) -> "BackendResult":
        return cls(data=data)

    @classmethod
    def failure(
        cls, message: str, code: str | None = None, kind: str = KIND_REQUEST
    ) -> "BackendResult":
        return cls(error=BackendError(message=message, code=code, kind=kind))


@dataclass
class AuthIdentity:
    """The auth provider's user record (distinct from the profile row)."""

    id: str
    email: str | None = None
    user_metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class AuthSession:
    """An authenticated session."""

    user: AuthIdentity
    access_token: str | None = None


AuthListener = Callable[[str, "AuthSession | None"], Awaitable[None]]


class Subscription:
    """Handle returned by on_auth_state_change."""

    def __init__(self, unsubscribe: Callable[[], None] | None = None):
        self._unsubscribe = unsubscribe
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        if self._unsubscribe is not None:
            self._unsubscribe()


class BackendClient(ABC):
    """Capability interface over the backend-as-a-service."""

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """True when the client talks to a real backend."""

    # -- authentication ----------------------------------------------------

    @abstractmethod
    async def get_session(self) -> BackendResult:
        """Return the current AuthSession (data may be None)."""

    @abstractmethod
    async def get_user(self) -> BackendResult:
        """Return the AuthIdentity of the current session."""

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> BackendResult:
        """Sign in; data is the AuthIdentity."""

    @abstractmethod
    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any]
    ) -> BackendResult:
        """Register a new account; data is the AuthIdentity (or None)."""

    @abstractmethod
    async def sign_out(self) -> BackendResult:
        """End the current session."""

    @abstractmethod
    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        """Register a listener for SIGNED_IN / SIGNED_OUT / TOKEN_REFRESHED."""

    # -- users table ---------------------------------------------------------

    @abstractmethod
    async def fetch_profile(self, user_id: str, columns: str = "*") -> BackendResult:
        """Select one users row by id. Missing rows report NOT_FOUND_CODE."""

    @abstractmethod
    async def upsert_profile(self, row: dict[str, Any]) -> BackendResult:
        """Insert or update a users row (conflict on id)."""

    @abstractmethod
    async def insert_profile(self, row: dict[str, Any]) -> BackendResult:
        """Insert a users row."""

    # -- books table ---------------------------------------------------------

    @abstractmethod
    async def fetch_books(self) -> BackendResult:
        """Select all books rows, newest first."""

    @abstractmethod
    async def insert_book(self, row: dict[str, Any]) -> BackendResult:
        """Insert a books row; data is the stored row."""

    @abstractmethod
    async def delete_book(self, book_id: str) -> BackendResult:
        """Delete a books row by id."""

    # -- object storage -------------------------------------------------------

    @abstractmethod
    async def upload_file(
        self, bucket: str, path: str, data: bytes, content_type: str
    ) -> BackendResult:
        """Upload raw bytes; data is the stored object path."""

    @abstractmethod
    def get_public_url(self, bucket: str, path: str) -> str:
        """Public URL of a stored object ("" when unavailable)."""
