"""Supabase implementation of the backend client.

Wraps the synchronous supabase-py client. Each call runs in a worker
thread via asyncio.to_thread so the event loop stays responsive, and SDK
exceptions are converted into BackendResult errors at this boundary.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from supabase import AuthError, Client, PostgrestAPIError, create_client

from studyvault.backend.base import (
    KIND_AUTH,
    KIND_NOT_FOUND,
    KIND_PERMISSION,
    KIND_REQUEST,
    KIND_STORAGE,
    NOT_FOUND_CODE,
    AuthIdentity,
    AuthListener,
    AuthSession,
    BackendClient,
    BackendError,
    BackendResult,
    Subscription,
)
from studyvault.config.app_config import BackendConfig

logger = structlog.get_logger(__name__)

USERS_TABLE = "users"
BOOKS_TABLE = "books"

# Postgres insufficient_privilege, reported on row-level policy rejections
RLS_CODE = "42501"


def _to_identity(user: Any) -> AuthIdentity | None:
    if user is None:
        return None
    return AuthIdentity(
        id=str(user.id),
        email=getattr(user, "email", None),
        user_metadata=dict(getattr(user, "user_metadata", None) or {}),
    )


def _to_session(session: Any) -> AuthSession | None:
    if session is None or getattr(session, "user", None) is None:
        return None
    return AuthSession(
        user=_to_identity(session.user),
        access_token=getattr(session, "access_token", None),
    )


def _postgrest_error(exc: PostgrestAPIError) -> BackendError:
    code = getattr(exc, "code", None)
    message = getattr(exc, "message", None) or str(exc)
    if code == NOT_FOUND_CODE:
        kind = KIND_NOT_FOUND
    elif code == RLS_CODE or "row-level security policy" in message:
        kind = KIND_PERMISSION
    else:
        kind = KIND_REQUEST
    return BackendError(
        message=message,
        code=code,
        kind=kind,
        details=getattr(exc, "details", None),
        hint=getattr(exc, "hint", None),
    )


def _auth_error(exc: AuthError) -> BackendError:
    return BackendError(
        message=getattr(exc, "message", None) or str(exc),
        code=getattr(exc, "code", None),
        kind=KIND_AUTH,
    )


class SupabaseBackend(BackendClient):
    """Backend client for a configured Supabase project."""

    def __init__(self, config: BackendConfig, client: Client | None = None):
        self.config = config
        self._client = client or create_client(config.url, config.anon_key)
        logger.info("backend.client_created", url=config.url)

    @property
    def is_connected(self) -> bool:
        return True

    async def _call(self, operation: str, func, *args, **kwargs) -> BackendResult:
        """Run a blocking SDK call and convert its failure modes."""
        try:
            data = await asyncio.to_thread(func, *args, **kwargs)
        except PostgrestAPIError as exc:
            error = _postgrest_error(exc)
            logger.warning(
                "backend.request_failed",
                operation=operation,
                code=error.code,
                message=error.message,
                details=error.details,
                hint=error.hint,
            )
            return BackendResult(error=error)
        except AuthError as exc:
            error = _auth_error(exc)
            logger.warning(
                "backend.auth_failed", operation=operation, message=error.message
            )
            return BackendResult(error=error)
        except Exception as exc:
            logger.error("backend.unexpected_error", operation=operation, error=str(exc))
            return BackendResult.failure(str(exc), kind=KIND_REQUEST)
        return BackendResult.success(data)

    # -- authentication ----------------------------------------------------

    async def get_session(self) -> BackendResult:
        result = await self._call("get_session", self._client.auth.get_session)
        if result.ok:
            result.data = _to_session(result.data)
        return result

    async def get_user(self) -> BackendResult:
        result = await self._call("get_user", self._client.auth.get_user)
        if result.ok:
            result.data = _to_identity(getattr(result.data, "user", None))
        return result

    async def sign_in_with_password(self, email: str, password: str) -> BackendResult:
        result = await self._call(
            "sign_in",
            self._client.auth.sign_in_with_password,
            {"email": email, "password": password},
        )
        if result.ok:
            result.data = _to_identity(getattr(result.data, "user", None))
        return result

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any]
    ) -> BackendResult:
        result = await self._call(
            "sign_up",
            self._client.auth.sign_up,
            {"email": email, "password": password, "options": {"data": metadata}},
        )
        if result.ok:
            result.data = _to_identity(getattr(result.data, "user", None))
        return result

    async def sign_out(self) -> BackendResult:
        return await self._call("sign_out", self._client.auth.sign_out)

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        loop = asyncio.get_running_loop()

        def _callback(event: Any, session: Any) -> None:
            # The SDK fires callbacks from whichever thread made the call
            asyncio.run_coroutine_threadsafe(
                listener(str(getattr(event, "value", event)), _to_session(session)),
                loop,
            )

        handle = self._client.auth.on_auth_state_change(_callback)
        return Subscription(unsubscribe=handle.unsubscribe)

    # -- users table ---------------------------------------------------------

    async def fetch_profile(self, user_id: str, columns: str = "*") -> BackendResult:
        query = (
            self._client.table(USERS_TABLE).select(columns).eq("id", user_id).single()
        )
        result = await self._call("fetch_profile", query.execute)
        if result.ok:
            result.data = result.data.data
        return result

    async def upsert_profile(self, row: dict[str, Any]) -> BackendResult:
        query = self._client.table(USERS_TABLE).upsert(row, on_conflict="id")
        result = await self._call("upsert_profile", query.execute)
        if result.ok:
            result.data = result.data.data
        return result

    async def insert_profile(self, row: dict[str, Any]) -> BackendResult:
        query = self._client.table(USERS_TABLE).insert(row)
        result = await self._call("insert_profile", query.execute)
        if result.ok:
            result.data = result.data.data
        return result

    # -- books table ---------------------------------------------------------

    async def fetch_books(self) -> BackendResult:
        query = (
            self._client.table(BOOKS_TABLE).select("*").order("created_at", desc=True)
        )
        result = await self._call("fetch_books", query.execute)
        if result.ok:
            result.data = result.data.data or []
        return result

    async def insert_book(self, row: dict[str, Any]) -> BackendResult:
        query = self._client.table(BOOKS_TABLE).insert(row)
        result = await self._call("insert_book", query.execute)
        if result.ok:
            rows = result.data.data or []
            result.data = rows[0] if rows else None
        return result

    async def delete_book(self, book_id: str) -> BackendResult:
        query = self._client.table(BOOKS_TABLE).delete().eq("id", book_id)
        result = await self._call("delete_book", query.execute)
        if result.ok:
            result.data = None
        return result

    # -- object storage -------------------------------------------------------

    async def upload_file(
        self, bucket: str, path: str, data: bytes, content_type: str
    ) -> BackendResult:
        result = await self._call(
            "upload_file",
            self._client.storage.from_(bucket).upload,
            path=path,
            file=data,
            file_options={
                "cache-control": "3600",
                "upsert": "false",
                "content-type": content_type,
            },
        )
        if not result.ok:
            result.error.kind = KIND_STORAGE
            return result
        result.data = getattr(result.data, "path", None) or path
        return result

    def get_public_url(self, bucket: str, path: str) -> str:
        return self._client.storage.from_(bucket).get_public_url(path)
