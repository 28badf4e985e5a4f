"""Health and connection status endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from studyvault import __version__
from studyvault.web.context import AppContext
from studyvault.web.dependencies import get_context
from studyvault.web.schemas import HealthResponse, StatusResponse

router = APIRouter(tags=["health"])

NOT_CONNECTED_BANNER = (
    "Supabase Not Connected. Please click the \"Connect to Supabase\" button "
    "in the top right corner to set up your database connection."
)


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check API health status."""
    return HealthResponse(
        status="ok",
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.get("/api/status", response_model=StatusResponse)
async def app_status(ctx: AppContext = Depends(get_context)) -> StatusResponse:
    """Connection banner and auth gate state."""
    return StatusResponse(
        connected=ctx.is_connected,
        loading=ctx.auth.is_loading,
        signed_in=ctx.auth.user is not None,
        banner=None if ctx.is_connected else NOT_CONNECTED_BANNER,
    )
