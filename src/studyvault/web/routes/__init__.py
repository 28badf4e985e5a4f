"""Route handlers for the StudyVault API."""

from studyvault.web.routes.health import router as health_router
from studyvault.web.routes.auth import router as auth_router
from studyvault.web.routes.dashboard import router as dashboard_router
from studyvault.web.routes.books import router as books_router
from studyvault.web.routes.reader import router as reader_router
from studyvault.web.routes.admin import router as admin_router
from studyvault.web.routes.sidebar import router as sidebar_router
from studyvault.web.routes.fallback import router as fallback_router

__all__ = [
    "health_router",
    "auth_router",
    "dashboard_router",
    "books_router",
    "reader_router",
    "admin_router",
    "sidebar_router",
    "fallback_router",
]
