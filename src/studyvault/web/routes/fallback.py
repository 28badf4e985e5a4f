"""Catch-all for unknown page paths."""

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import RedirectResponse

router = APIRouter(include_in_schema=False)


@router.get("/{path:path}")
async def unknown_path(path: str) -> RedirectResponse:
    """Unknown pages redirect to the dashboard; unknown API paths are 404."""
    if path.startswith("api/"):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return RedirectResponse(url="/", status_code=status.HTTP_307_TEMPORARY_REDIRECT)
