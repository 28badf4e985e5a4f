"""Backend-as-a-service client package.

Provides:
- BackendClient interface and result types
- DisconnectedBackend for unconfigured environments
- SupabaseBackend (imported on demand by create_backend_client)
"""

from studyvault.backend.base import (
    NOT_CONNECTED_MESSAGE,
    NOT_FOUND_CODE,
    AuthIdentity,
    AuthSession,
    BackendClient,
    BackendError,
    BackendResult,
    Subscription,
)
from studyvault.backend.disconnected import DisconnectedBackend
from studyvault.backend.factory import create_backend_client

__all__ = [
    "NOT_CONNECTED_MESSAGE",
    "NOT_FOUND_CODE",
    "AuthIdentity",
    "AuthSession",
    "BackendClient",
    "BackendError",
    "BackendResult",
    "DisconnectedBackend",
    "Subscription",
    "create_backend_client",
]
