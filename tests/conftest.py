"""Pytest configuration for phased testing.

Tests are organized by phase (f1, f2, ..., f6):
- f1: storage and utils
- f2: configuration and backend clients
- f3: profile derivation and auth state
- f4: catalog
- f5: sidebar, reader, uploads
- f6: web API and CLI

Future phase tests are automatically skipped. Shared fixtures provide an
in-memory backend and isolated config/storage under tmp_path.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from studyvault.backend.base import (
    KIND_AUTH,
    KIND_NOT_FOUND,
    NOT_FOUND_CODE,
    AuthIdentity,
    AuthListener,
    AuthSession,
    BackendClient,
    BackendError,
    BackendResult,
    Subscription,
)
from studyvault.config.app_config import (
    AppConfig,
    AuthConfig,
    BackendConfig,
    StorageConfig,
    clear_config_cache,
)
from studyvault.core.models import Book
from studyvault.storage.file_store import LocalFileStore
from studyvault.storage.object_urls import ObjectUrlRegistry

# Current implementation phase
CURRENT_PHASE = 6


def pytest_collection_modifyitems(config, items):
    """Skip tests from phases that haven't been implemented yet."""
    for item in items:
        # Extract phase from path (tests/f2/... -> 2)
        parts = item.fspath.strpath.split("/")
        for part in parts:
            if part.startswith("f") and part[1:].isdigit():
                test_phase = int(part[1:])
                if test_phase > CURRENT_PHASE:
                    item.add_marker(
                        pytest.mark.skip(
                            reason=f"Phase F{test_phase} not yet implemented (current: F{CURRENT_PHASE})"
                        )
                    )
                break


# =============================================================================
# IN-MEMORY BACKEND
# =============================================================================


class FakeBackend(BackendClient):
    """In-memory backend with Supabase-shaped results.

    Failure injection: set ``books_error``, ``insert_book_error``,
    ``delete_error``, ``upload_error``, ``upsert_error`` or
    ``sign_out_error`` to a BackendError; set ``profile_delay`` to make
    profile reads slow.
    """

    def __init__(self, connected: bool = True):
        self.connected = connected
        self.accounts: dict[str, tuple[str, AuthIdentity]] = {}
        self.users: dict[str, dict[str, Any]] = {}
        self.books: list[dict[str, Any]] = []
        self.objects: dict[str, bytes] = {}
        self.session: AuthSession | None = None
        self.listeners: list[AuthListener] = []

        self.books_error: BackendError | None = None
        self.insert_book_error: BackendError | None = None
        self.delete_error: BackendError | None = None
        self.upload_error: BackendError | None = None
        self.upsert_error: BackendError | None = None
        self.sign_out_error: BackendError | None = None
        self.profile_delay: float = 0.0

        self.profile_fetches = 0
        self.inserted_rows: list[dict[str, Any]] = []
        self._next_id = 0

    def _new_id(self, prefix: str) -> str:
        self._next_id += 1
        return f"{prefix}-{self._next_id}"

    # -- helpers ---------------------------------------------------------------

    def add_account(
        self,
        email: str,
        password: str = "secret123",
        name: str = "Test User",
        role: str = "student",
        with_profile: bool = True,
    ) -> AuthIdentity:
        identity = AuthIdentity(
            id=self._new_id("user"),
            email=email,
            user_metadata={"full_name": name, "role": role},
        )
        self.accounts[email] = (password, identity)
        if with_profile:
            self.users[identity.id] = {
                "id": identity.id,
                "full_name": name,
                "email": email,
                "role": role,
            }
        return identity

    def add_book_row(
        self,
        title: str,
        subject: str,
        semester: int,
        pdf_url: str = "https://example.com/book.pdf",
        author: str | None = None,
        created_at: str = "2024-03-01T09:30:00+00:00",
    ) -> dict[str, Any]:
        row = {
            "id": self._new_id("book"),
            "title": title,
            "subject": subject,
            "semester": semester,
            "author": author,
            "cover_image_url": "https://example.com/cover.jpg",
            "pdf_url": pdf_url,
            "created_at": created_at,
        }
        self.books.insert(0, row)
        return row

    async def emit(self, event: str, session: AuthSession | None) -> None:
        for listener in list(self.listeners):
            await listener(event, session)

    # -- BackendClient ---------------------------------------------------------

    @property
    def is_connected(self) -> bool:
        return self.connected

    async def get_session(self) -> BackendResult:
        return BackendResult.success(self.session)

    async def get_user(self) -> BackendResult:
        if self.session is None:
            return BackendResult.failure("Auth session missing!", kind=KIND_AUTH)
        return BackendResult.success(self.session.user)

    async def sign_in_with_password(self, email: str, password: str) -> BackendResult:
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            return BackendResult.failure(
                "Invalid login credentials", code="invalid_credentials", kind=KIND_AUTH
            )
        self.session = AuthSession(user=account[1], access_token="token")
        return BackendResult.success(account[1])

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any]
    ) -> BackendResult:
        if email in self.accounts:
            return BackendResult.failure("User already registered", kind=KIND_AUTH)
        if len(password) < 6:
            return BackendResult.failure(
                "Password should be at least 6 characters.", kind=KIND_AUTH
            )
        identity = AuthIdentity(
            id=self._new_id("user"), email=email, user_metadata=dict(metadata)
        )
        self.accounts[email] = (password, identity)
        self.session = AuthSession(user=identity, access_token="token")
        return BackendResult.success(identity)

    async def sign_out(self) -> BackendResult:
        self.session = None
        if self.sign_out_error is not None:
            return BackendResult(error=self.sign_out_error)
        return BackendResult.success()

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        self.listeners.append(listener)
        return Subscription(lambda: self.listeners.remove(listener))

    async def fetch_profile(self, user_id: str, columns: str = "*") -> BackendResult:
        self.profile_fetches += 1
        if self.profile_delay:
            await asyncio.sleep(self.profile_delay)
        row = self.users.get(user_id)
        if row is None:
            return BackendResult.failure(
                "JSON object requested, multiple (or no) rows returned",
                code=NOT_FOUND_CODE,
                kind=KIND_NOT_FOUND,
            )
        return BackendResult.success(dict(row))

    async def upsert_profile(self, row: dict[str, Any]) -> BackendResult:
        if self.upsert_error is not None:
            return BackendResult(error=self.upsert_error)
        self.users[row["id"]] = {**self.users.get(row["id"], {}), **row}
        return BackendResult.success([dict(row)])

    async def insert_profile(self, row: dict[str, Any]) -> BackendResult:
        if row["id"] in self.users:
            return BackendResult.failure(
                'duplicate key value violates unique constraint "users_pkey"',
                code="23505",
            )
        self.users[row["id"]] = dict(row)
        return BackendResult.success([dict(row)])

    async def fetch_books(self) -> BackendResult:
        if self.books_error is not None:
            return BackendResult(error=self.books_error)
        return BackendResult.success([dict(row) for row in self.books])

    async def insert_book(self, row: dict[str, Any]) -> BackendResult:
        self.inserted_rows.append(dict(row))
        if self.insert_book_error is not None:
            return BackendResult(error=self.insert_book_error)
        stored = {
            **row,
            "id": self._new_id("book"),
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self.books.insert(0, stored)
        return BackendResult.success(dict(stored))

    async def delete_book(self, book_id: str) -> BackendResult:
        if self.delete_error is not None:
            return BackendResult(error=self.delete_error)
        self.books = [row for row in self.books if row["id"] != book_id]
        return BackendResult.success()

    async def upload_file(
        self, bucket: str, path: str, data: bytes, content_type: str
    ) -> BackendResult:
        if self.upload_error is not None:
            return BackendResult(error=self.upload_error)
        self.objects[f"{bucket}/{path}"] = data
        return BackendResult.success(path)

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"https://fake.supabase.co/storage/v1/object/public/{bucket}/{path}"


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def _isolated_config():
    """Never leak a cached config between tests."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def fake_backend() -> FakeBackend:
    """Connected in-memory backend."""
    return FakeBackend()


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    """Config with fake credentials, short timeouts and a tmp file store."""
    return AppConfig(
        backend=BackendConfig(
            url="https://fake.supabase.co", anon_key="anon-key", books_bucket="books"
        ),
        auth=AuthConfig(
            admin_email="admin@example.com",
            profile_fetch_timeout=0.2,
            init_timeout=1.0,
        ),
        storage=StorageConfig(local_db_path=str(tmp_path / "files.db")),
    )


@pytest.fixture
def object_urls() -> ObjectUrlRegistry:
    return ObjectUrlRegistry()


@pytest.fixture
def file_store(tmp_path: Path, object_urls: ObjectUrlRegistry) -> LocalFileStore:
    return LocalFileStore(tmp_path / "files.db", object_urls)


@pytest.fixture
def make_book():
    """Factory for Book view models."""
    counter = {"n": 0}

    def _make(
        title: str = "Calculus",
        subject: str = "Mathematics",
        semester: int = 1,
        pdf_url: str = "https://example.com/calculus.pdf",
        author: str | None = None,
    ) -> Book:
        counter["n"] += 1
        return Book(
            id=f"book-{counter['n']}",
            title=title,
            subject=subject,
            semester=semester,
            cover_image="https://example.com/cover.jpg",
            pdf_url=pdf_url,
            upload_date="2024-03-01",
            author=author,
        )

    return _make
