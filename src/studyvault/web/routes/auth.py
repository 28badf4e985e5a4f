"""Authentication endpoints (login, signup, logout, current user)."""

import structlog
from fastapi import APIRouter, Depends, Response, status

from studyvault.core.auth_state import AuthResult
from studyvault.core.models import User
from studyvault.web.context import AppContext
from studyvault.web.dependencies import get_context, require_user
from studyvault.web.schemas import (
    AuthResponse,
    LoginRequest,
    SignupRequest,
    UserResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(result: AuthResult, ctx: AppContext, response: Response) -> AuthResponse:
    if not result.success:
        response.status_code = status.HTTP_400_BAD_REQUEST
        return AuthResponse(success=False, error=result.error)

    user = ctx.auth.user
    return AuthResponse(
        success=True,
        user=UserResponse.from_user(user) if user is not None else None,
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    response: Response,
    ctx: AppContext = Depends(get_context),
) -> AuthResponse:
    """Sign in with email and password."""
    result = await ctx.auth.login(body.email, body.password)
    return _auth_response(result, ctx, response)


@router.post("/signup", response_model=AuthResponse)
async def signup(
    body: SignupRequest,
    response: Response,
    ctx: AppContext = Depends(get_context),
) -> AuthResponse:
    """Create an account."""
    result = await ctx.auth.signup(body.name, body.email, body.password)
    return _auth_response(result, ctx, response)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(ctx: AppContext = Depends(get_context)) -> None:
    """Sign out. Always succeeds."""
    await ctx.auth.logout()


@router.get("/me", response_model=UserResponse)
async def current_user(user: User = Depends(require_user)) -> UserResponse:
    """The signed-in user."""
    return UserResponse.from_user(user)


@router.post("/refresh", response_model=UserResponse)
async def refresh_profile(
    ctx: AppContext = Depends(get_context),
    user: User = Depends(require_user),
) -> UserResponse:
    """Re-read the signed-in user's profile (picks up role changes)."""
    refreshed = await ctx.auth.refresh_profile()
    logger.info("auth.profile_refreshed", user_id=user.id)
    return UserResponse.from_user(refreshed or user)
