"""FastAPI dependencies for context access and route gating."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from studyvault.core.models import User
from studyvault.web.context import AppContext


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def require_user(ctx: AppContext = Depends(get_context)) -> User:
    """Signed-in user, or 503 while auth is still initializing, or 401."""
    if ctx.auth.is_loading:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Loading StudyVault...",
        )
    if ctx.auth.user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please log in to continue",
        )
    return ctx.auth.user


def require_admin(user: User = Depends(require_user)) -> User:
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have permission to access this page.",
        )
    return user
