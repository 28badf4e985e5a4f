"""Backend used when no connection parameters are configured.

Session lookups report "no session" and sign-out succeeds, so the app
boots into the login screen. Every other call fails fast with the same
not-connected error.
"""

from __future__ import annotations

from typing import Any

import structlog

from studyvault.backend.base import (
    KIND_NOT_CONNECTED,
    NOT_CONNECTED_MESSAGE,
    AuthListener,
    BackendClient,
    BackendResult,
    Subscription,
)

logger = structlog.get_logger(__name__)


def _not_connected() -> BackendResult:
    return BackendResult.failure(NOT_CONNECTED_MESSAGE, kind=KIND_NOT_CONNECTED)


class DisconnectedBackend(BackendClient):
    """Stub client returning a uniform not-connected error."""

    @property
    def is_connected(self) -> bool:
        return False

    async def get_session(self) -> BackendResult:
        return BackendResult.success(None)

    async def get_user(self) -> BackendResult:
        return _not_connected()

    async def sign_in_with_password(self, email: str, password: str) -> BackendResult:
        logger.debug("backend.not_connected", operation="sign_in")
        return _not_connected()

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any]
    ) -> BackendResult:
        logger.debug("backend.not_connected", operation="sign_up")
        return _not_connected()

    async def sign_out(self) -> BackendResult:
        return BackendResult.success()

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        return Subscription()

    async def fetch_profile(self, user_id: str, columns: str = "*") -> BackendResult:
        return _not_connected()

    async def upsert_profile(self, row: dict[str, Any]) -> BackendResult:
        return _not_connected()

    async def insert_profile(self, row: dict[str, Any]) -> BackendResult:
        return _not_connected()

    async def fetch_books(self) -> BackendResult:
        logger.debug("backend.not_connected", operation="fetch_books")
        return BackendResult(data=[], error=_not_connected().error)

    async def insert_book(self, row: dict[str, Any]) -> BackendResult:
        return _not_connected()

    async def delete_book(self, book_id: str) -> BackendResult:
        return _not_connected()

    async def upload_file(
        self, bucket: str, path: str, data: bytes, content_type: str
    ) -> BackendResult:
        return _not_connected()

    def get_public_url(self, bucket: str, path: str) -> str:
        return ""
