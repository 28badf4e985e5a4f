"""Backend client selection."""

from __future__ import annotations

import structlog

from studyvault.backend.base import BackendClient
from studyvault.backend.disconnected import DisconnectedBackend
from studyvault.config.app_config import BackendConfig

logger = structlog.get_logger(__name__)


def create_backend_client(config: BackendConfig) -> BackendClient:
    """Build the real client when credentials exist, the stub otherwise."""
    if not config.is_configured:
        logger.error(
            "backend.missing_credentials",
            hint='Click "Connect to Supabase" to set up your database',
        )
        return DisconnectedBackend()

    # Imported lazily so the disconnected mode never touches the SDK
    from studyvault.backend.supabase_client import SupabaseBackend

    return SupabaseBackend(config)
