"""Application context.

Creates the state containers once at startup and wires them together:
the catalog follows the auth user, the uploader writes through the
catalog, the reader reads from the local file store. Routes reach the
context through ``request.app.state.context``.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from studyvault.backend.base import BackendClient
from studyvault.backend.factory import create_backend_client
from studyvault.config.app_config import AppConfig, load_app_config
from studyvault.core.auth_state import AuthState
from studyvault.core.catalog_state import CatalogState
from studyvault.core.reader import ReaderSession
from studyvault.core.sidebar_state import SidebarState
from studyvault.core.uploads import BookUploader
from studyvault.storage.file_store import LocalFileStore
from studyvault.storage.object_urls import ObjectUrlRegistry

logger = structlog.get_logger(__name__)


class AppContext:
    """Process-wide state for one StudyVault instance."""

    def __init__(
        self,
        config: AppConfig | None = None,
        backend: BackendClient | None = None,
    ):
        self.config = config or load_app_config()
        self.backend = backend or create_backend_client(self.config.backend)

        self.object_urls = ObjectUrlRegistry()
        self.file_store = LocalFileStore(
            Path(self.config.storage.local_db_path), self.object_urls
        )

        self.auth = AuthState(self.backend, self.config.auth)
        self.catalog = CatalogState(
            self.backend,
            default_cover=self.config.ui.default_cover_image,
            semesters=self.config.ui.semesters,
        )
        self.auth.add_user_listener(self.catalog.on_user_changed)

        self.sidebar = SidebarState(breakpoint=self.config.ui.sidebar_breakpoint)
        self.uploader = BookUploader(
            self.backend, self.catalog, self.file_store, self.config
        )
        self.reader = ReaderSession(self.file_store)

    @property
    def is_connected(self) -> bool:
        return self.backend.is_connected

    async def start(self) -> None:
        """Subscribe to auth changes and restore any existing session."""
        self.auth.start()
        await self.auth.initialize()
        logger.info(
            "context.started",
            connected=self.is_connected,
            signed_in=self.auth.user is not None,
            books=len(self.catalog.books),
        )

    def close(self) -> None:
        self.reader.close()
        self.auth.close()
        logger.info("context.closed")
