"""Auth state container.

Holds the current User for the process, runs login/signup/logout
against the backend, and follows the backend's session-change
notifications. Login and signup never raise: they return an AuthResult
whose ``error`` is the message shown on the form.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

import structlog

from studyvault.backend.base import (
    AuthIdentity,
    AuthSession,
    BackendClient,
    Subscription,
)
from studyvault.config.app_config import AuthConfig
from studyvault.core.models import Role, User
from studyvault.core.profile import build_profile_row, derive_user, is_admin_email
from studyvault.utils.validators import validate_email

logger = structlog.get_logger(__name__)

# Auth change events
SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
TOKEN_REFRESHED = "TOKEN_REFRESHED"

# Form messages
MSG_INVALID_CREDENTIALS = "Invalid email or password. Please check your credentials."
MSG_EMAIL_NOT_CONFIRMED = (
    "Please check your email and confirm your account before logging in."
)
MSG_LOGIN_FAILED = "Login failed. Please try again."
MSG_ALREADY_REGISTERED = (
    "An account with this email already exists. Please log in instead."
)
MSG_WEAK_PASSWORD = "Password must be at least 6 characters long."
MSG_INVALID_EMAIL = "Please enter a valid email address."
MSG_PROFILE_SETUP_FAILED = (
    "Account created but failed to set up profile. Please try logging in."
)
MSG_SIGNUP_FAILED = "Failed to create account. Please try again."
MSG_UNEXPECTED = "An unexpected error occurred. Please try again."

UserListener = Callable[["User | None", "User | None"], Awaitable[None]]


@dataclass
class AuthResult:
    """Outcome of login or signup."""

    success: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> "AuthResult":
        return cls(success=True)

    @classmethod
    def failed(cls, error: str) -> "AuthResult":
        return cls(success=False, error=error)


def login_error_message(message: str) -> str:
    """Form message for a backend sign-in error."""
    if message == "Invalid login credentials":
        return MSG_INVALID_CREDENTIALS
    if "Email not confirmed" in message:
        return MSG_EMAIL_NOT_CONFIRMED
    return message


def signup_error_message(message: str) -> str:
    """Form message for a backend sign-up error."""
    if message == "User already registered":
        return MSG_ALREADY_REGISTERED
    if "Password should be at least" in message:
        return MSG_WEAK_PASSWORD
    if "Invalid email" in message:
        return MSG_INVALID_EMAIL
    return message


class AuthState:
    """Process-wide session holder.

    Lifecycle: created at application start, ``start()`` subscribes to the
    backend's change notifications, ``initialize()`` restores an existing
    session, ``close()`` unsubscribes at shutdown.
    """

    def __init__(self, backend: BackendClient, config: AuthConfig | None = None):
        self._backend = backend
        self._config = config or AuthConfig()
        self.user: User | None = None
        self.is_loading = True
        self._listeners: list[UserListener] = []
        self._subscription: Subscription | None = None
        self._safety_handle: asyncio.TimerHandle | None = None

    @property
    def backend(self) -> BackendClient:
        return self._backend

    def add_user_listener(self, listener: UserListener) -> None:
        """Call ``listener(previous, current)`` whenever the user changes."""
        self._listeners.append(listener)

    async def _set_user(self, user: User | None) -> None:
        previous = self.user
        self.user = user
        for listener in self._listeners:
            await listener(previous, user)

    async def _derive(self, identity: AuthIdentity) -> User:
        return await derive_user(
            identity,
            self._backend,
            admin_email=self._config.admin_email,
            fetch_timeout=self._config.profile_fetch_timeout,
        )

    # -- lifecycle -----------------------------------------------------------

    def start(self) -> None:
        """Subscribe to session-change notifications."""
        if self._subscription is None:
            self._subscription = self._backend.on_auth_state_change(
                self.handle_auth_event
            )

    def close(self) -> None:
        self._cancel_safety_timer()
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _force_loading_off(self) -> None:
        if self.is_loading:
            logger.warning(
                "auth.safety_timeout", timeout=self._config.init_timeout
            )
            self.is_loading = False

    def _cancel_safety_timer(self) -> None:
        if self._safety_handle is not None:
            self._safety_handle.cancel()
            self._safety_handle = None

    async def initialize(self) -> None:
        """Restore an existing session, bounded by the init timeout.

        A separate safety timer clears ``is_loading`` after the same budget
        even if profile resolution is still running.
        """
        logger.info("auth.initializing")
        self.is_loading = True
        loop = asyncio.get_running_loop()
        self._safety_handle = loop.call_later(
            self._config.init_timeout, self._force_loading_off
        )

        try:
            try:
                result = await asyncio.wait_for(
                    self._backend.get_session(), timeout=self._config.init_timeout
                )
            except asyncio.TimeoutError:
                logger.warning("auth.session_check_timeout")
                await self._set_user(None)
                return

            if not result.ok:
                logger.warning("auth.session_check_failed", error=result.error.message)
                await self._set_user(None)
                return

            session: AuthSession | None = result.data
            logger.info("auth.session_status", found=session is not None)

            if session is not None:
                await self._set_user(await self._derive(session.user))
            else:
                await self._set_user(None)
        except Exception as exc:
            logger.error("auth.initialize_failed", error=str(exc))
            self.user = None
        finally:
            self._cancel_safety_timer()
            self.is_loading = False
            logger.info("auth.initialized", signed_in=self.user is not None)

    async def handle_auth_event(self, event: str, session: AuthSession | None) -> None:
        """React to a backend session-change notification."""
        logger.info("auth.state_change", auth_event=event, has_session=session is not None)

        if event == SIGNED_IN and session is not None:
            self.is_loading = True
            try:
                await self._set_user(await self._derive(session.user))
            except Exception as exc:
                logger.error("auth.sign_in_handling_failed", error=str(exc))
            finally:
                self.is_loading = False
        elif event == SIGNED_OUT:
            await self._set_user(None)
        elif event == TOKEN_REFRESHED:
            logger.debug("auth.token_refreshed")

    # -- operations ----------------------------------------------------------

    async def login(self, email: str, password: str) -> AuthResult:
        """Sign in with email and password."""
        self.is_loading = True
        try:
            result = await self._backend.sign_in_with_password(email, password)

            if not result.ok:
                logger.warning(
                    "auth.login_failed",
                    message=result.error.message,
                    code=result.error.code,
                )
                return AuthResult.failed(login_error_message(result.error.message))

            if result.data is None:
                return AuthResult.failed(MSG_LOGIN_FAILED)

            await self._set_user(await self._derive(result.data))
            logger.info("auth.logged_in", user_id=self.user.id)
            return AuthResult.ok()
        except Exception as exc:
            logger.error("auth.login_error", error=str(exc))
            return AuthResult.failed(MSG_UNEXPECTED)
        finally:
            self.is_loading = False

    async def signup(self, name: str, email: str, password: str) -> AuthResult:
        """Register a new account; the admin role goes to the admin email only."""
        if not validate_email(email):
            return AuthResult.failed(MSG_INVALID_EMAIL)

        self.is_loading = True
        try:
            role = (
                Role.ADMIN
                if is_admin_email(email, self._config.admin_email)
                else Role.STUDENT
            )
            result = await self._backend.sign_up(
                email, password, {"full_name": name, "role": role.value}
            )

            if not result.ok:
                logger.warning("auth.signup_failed", message=result.error.message)
                return AuthResult.failed(signup_error_message(result.error.message))

            identity: AuthIdentity | None = result.data
            if identity is None:
                return AuthResult.failed(MSG_SIGNUP_FAILED)

            metadata = {**identity.user_metadata, "role": role.value}
            profile_row = build_profile_row(
                AuthIdentity(id=identity.id, email=identity.email, user_metadata=metadata),
                self._config.admin_email,
            )
            created = await self._backend.upsert_profile(profile_row)
            if not created.ok:
                logger.warning(
                    "auth.profile_setup_failed", error=created.error.message
                )
                return AuthResult.failed(MSG_PROFILE_SETUP_FAILED)

            await self._set_user(User(id=identity.id, name=name, email=email, role=role))
            logger.info("auth.signed_up", user_id=identity.id, role=role.value)
            return AuthResult.ok()
        except Exception as exc:
            logger.error("auth.signup_error", error=str(exc))
            return AuthResult.failed(MSG_UNEXPECTED)
        finally:
            self.is_loading = False

    async def logout(self) -> None:
        """Sign out. Backend errors are logged, the user is always cleared."""
        try:
            result = await self._backend.sign_out()
            if not result.ok:
                logger.warning("auth.logout_failed", error=result.error.message)
        except Exception as exc:
            logger.warning("auth.logout_error", error=str(exc))
        await self._set_user(None)
        logger.info("auth.logged_out")

    async def refresh_profile(self) -> User | None:
        """Re-derive the current user's profile from the backend."""
        result = await self._backend.get_user()
        if not result.ok or result.data is None:
            logger.warning(
                "auth.refresh_failed",
                error=result.error.message if result.error else "no user",
            )
            return self.user

        await self._set_user(await self._derive(result.data))
        return self.user
