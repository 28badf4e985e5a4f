"""Profile derivation.

Turns an auth identity into a User by running an ordered list of steps.
Each step returns a User or None ("try the next one"); the last step
always produces a User from the identity's own fields, so derivation
never fails.

Steps:
1. fetch_existing  - read the users row (bounded by a timeout)
2. create_missing  - only when step 1 saw "no such row": upsert it, re-read
3. synthesize      - build the User from the identity alone
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import structlog

from studyvault.backend.base import AuthIdentity, BackendClient
from studyvault.core.models import Role, User

logger = structlog.get_logger(__name__)

DEFAULT_ADMIN_EMAIL = "admin@example.com"
DEFAULT_PROFILE_TIMEOUT = 3.0


@dataclass
class DerivationContext:
    """Inputs and shared flags for one derivation run."""

    identity: AuthIdentity
    backend: BackendClient
    admin_email: str = DEFAULT_ADMIN_EMAIL
    fetch_timeout: float = DEFAULT_PROFILE_TIMEOUT
    profile_missing: bool = False


ProfileStep = Callable[[DerivationContext], Awaitable["User | None"]]


def _email_local_part(email: str | None) -> str | None:
    if not email:
        return None
    return email.split("@")[0] or None


def is_admin_email(email: str | None, admin_email: str = DEFAULT_ADMIN_EMAIL) -> bool:
    return email == admin_email


def build_profile_row(
    identity: AuthIdentity, admin_email: str = DEFAULT_ADMIN_EMAIL
) -> dict[str, Any]:
    """users row for an identity that has none yet."""
    metadata = identity.user_metadata
    full_name = (
        metadata.get("full_name")
        or metadata.get("name")
        or _email_local_part(identity.email)
        or "User"
    )
    is_admin = (
        is_admin_email(identity.email, admin_email)
        or metadata.get("role") == Role.ADMIN.value
    )
    return {
        "id": identity.id,
        "full_name": full_name,
        "email": identity.email,
        "role": Role.ADMIN.value if is_admin else Role.STUDENT.value,
    }


async def fetch_existing(ctx: DerivationContext) -> User | None:
    """Read the profile row, giving up after the fetch timeout."""
    try:
        result = await asyncio.wait_for(
            ctx.backend.fetch_profile(ctx.identity.id), timeout=ctx.fetch_timeout
        )
    except asyncio.TimeoutError:
        logger.warning(
            "profile.fetch_timeout",
            user_id=ctx.identity.id,
            timeout=ctx.fetch_timeout,
        )
        return None

    if result.ok and result.data:
        logger.debug("profile.loaded", user_id=ctx.identity.id)
        return User.from_profile_row(result.data)

    if result.error is not None and result.error.is_not_found:
        ctx.profile_missing = True
    else:
        logger.warning(
            "profile.fetch_failed",
            user_id=ctx.identity.id,
            error=result.error.message if result.error else "empty row",
        )
    return None


async def create_missing(ctx: DerivationContext) -> User | None:
    """Create the profile row when the fetch step found none."""
    if not ctx.profile_missing:
        return None

    logger.info("profile.creating_missing", user_id=ctx.identity.id)
    created = await ctx.backend.upsert_profile(
        build_profile_row(ctx.identity, ctx.admin_email)
    )
    if not created.ok:
        logger.error(
            "profile.create_failed",
            user_id=ctx.identity.id,
            error=created.error.message,
        )
        return None

    refetched = await ctx.backend.fetch_profile(ctx.identity.id)
    if refetched.ok and refetched.data:
        logger.info("profile.created", user_id=ctx.identity.id)
        return User.from_profile_row(refetched.data)
    return None


async def synthesize(ctx: DerivationContext) -> User:
    """User built purely from the identity's own fields."""
    metadata = ctx.identity.user_metadata
    logger.info("profile.using_fallback", user_id=ctx.identity.id)
    return User(
        id=ctx.identity.id,
        name=metadata.get("full_name") or _email_local_part(ctx.identity.email) or "User",
        email=ctx.identity.email or "",
        role=Role.parse(metadata.get("role")),
    )


DEFAULT_STEPS: tuple[ProfileStep, ...] = (fetch_existing, create_missing)


async def derive_user(
    identity: AuthIdentity,
    backend: BackendClient,
    admin_email: str = DEFAULT_ADMIN_EMAIL,
    fetch_timeout: float = DEFAULT_PROFILE_TIMEOUT,
    steps: tuple[ProfileStep, ...] = DEFAULT_STEPS,
) -> User:
    """Resolve the User for an auth identity. Never raises for backend failures.

    Args:
        identity: Auth provider user
        backend: Backend client for the users table
        admin_email: Address that is granted the admin role
        fetch_timeout: Seconds allowed for the first profile read
        steps: Fallible steps tried in order before the synthesized default

    Returns:
        The derived User
    """
    ctx = DerivationContext(
        identity=identity,
        backend=backend,
        admin_email=admin_email,
        fetch_timeout=fetch_timeout,
    )

    for step in steps:
        try:
            user = await step(ctx)
        except Exception as exc:
            logger.error(
                "profile.step_failed",
                step=step.__name__,
                user_id=identity.id,
                error=str(exc),
            )
            break
        if user is not None:
            return user

    return await synthesize(ctx)
