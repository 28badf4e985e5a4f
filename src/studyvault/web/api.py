"""FastAPI application factory.

Main entry point for the StudyVault Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from studyvault import __version__
from studyvault.exceptions import StudyVaultError
from studyvault.web.context import AppContext
from studyvault.web.routes import (
    health_router,
    auth_router,
    dashboard_router,
    books_router,
    reader_router,
    admin_router,
    sidebar_router,
    fallback_router,
)

logger = structlog.get_logger(__name__)

ERROR_STATUS = {
    "configuration_missing": status.HTTP_503_SERVICE_UNAVAILABLE,
    "authentication": status.HTTP_401_UNAUTHORIZED,
    "permission_denied": status.HTTP_403_FORBIDDEN,
    "not_found": status.HTTP_404_NOT_FOUND,
    "upload_invalid": status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    "upload_too_large": status.HTTP_413_CONTENT_TOO_LARGE,
    "invalid_semester": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "backend": status.HTTP_502_BAD_GATEWAY,
    "storage": status.HTTP_502_BAD_GATEWAY,
    "reader": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the context on startup (unless one was injected) and close it on shutdown."""
    if getattr(app.state, "context", None) is None:
        app.state.context = AppContext()
    ctx: AppContext = app.state.context

    await ctx.start()
    logger.info(
        "api_startup",
        connected=ctx.is_connected,
        local_db=ctx.config.storage.local_db_path,
    )
    yield
    ctx.close()


async def handle_studyvault_error(request: Request, exc: StudyVaultError) -> JSONResponse:
    status_code = ERROR_STATUS.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    logger.warning(
        "api.request_failed",
        path=request.url.path,
        kind=exc.kind,
        status=status_code,
        error=str(exc),
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": exc.kind},
    )


def create_app(context: AppContext | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        context: Pre-built application context (tests inject one with a
            fake backend). Built from config at startup when omitted.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="StudyVault API",
        description="Browse, upload and read PDF textbooks by semester and subject",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StudyVaultError, handle_studyvault_error)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(dashboard_router)
    app.include_router(books_router)
    app.include_router(reader_router)
    app.include_router(admin_router)
    app.include_router(sidebar_router)
    # Must stay last: catches every unmatched GET path
    app.include_router(fallback_router)

    return app


# Default app instance for uvicorn
app = create_app()
