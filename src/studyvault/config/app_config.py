"""Application configuration loader.

Loads configuration from data/config/studyvault_v1.yaml when present,
otherwise uses built-in defaults. Backend credentials always come from
the environment (SUPABASE_URL / SUPABASE_ANON_KEY, with the VITE_ prefixed
names accepted as a fallback) so they never live in the YAML file.

Usage:
    from studyvault.config.app_config import load_app_config

    config = load_app_config()
    if not config.backend.is_configured:
        ...
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/studyvault_v1.yaml")

URL_ENV_VARS = ("SUPABASE_URL", "VITE_SUPABASE_URL")
KEY_ENV_VARS = ("SUPABASE_ANON_KEY", "VITE_SUPABASE_ANON_KEY")

DEFAULT_COVER_IMAGE = (
    "https://images.pexels.com/photos/159711/books-bookstore-book-reading-159711.jpeg"
    "?auto=compress&cs=tinysrgb&w=300"
)


@dataclass
class BackendConfig:
    """Connection parameters for the backend-as-a-service."""

    url: str | None = None
    anon_key: str | None = None
    books_bucket: str | None = "books"

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.anon_key)


@dataclass
class AuthConfig:
    """Authentication behaviour."""

    admin_email: str = "admin@example.com"
    profile_fetch_timeout: float = 3.0
    init_timeout: float = 8.0


@dataclass
class StorageConfig:
    """Local file store and upload limits."""

    local_db_path: str = "data/studyvault_files.db"
    local_fallback: bool = True
    max_upload_bytes: int = 200 * 1024 * 1024


@dataclass
class UIConfig:
    """View defaults."""

    sidebar_breakpoint: int = 1024
    default_cover_image: str = DEFAULT_COVER_IMAGE
    semesters: int = 8


@dataclass
class AppConfig:
    """Application-wide configuration."""

    backend: BackendConfig = field(default_factory=BackendConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    ui: UIConfig = field(default_factory=UIConfig)


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "backend": {"books_bucket": "books"},
        "auth": {
            "admin_email": "admin@example.com",
            "profile_fetch_timeout": 3.0,
            "init_timeout": 8.0,
        },
        "storage": {
            "local_db_path": "data/studyvault_files.db",
            "local_fallback": True,
            "max_upload_bytes": 200 * 1024 * 1024,
        },
        "ui": {
            "sidebar_breakpoint": 1024,
            "default_cover_image": DEFAULT_COVER_IMAGE,
            "semesters": 8,
        },
    }


def _first_env(names: tuple[str, ...]) -> str | None:
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return None


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    backend_data = data.get("backend") or {}
    backend = BackendConfig(
        url=_first_env(URL_ENV_VARS),
        anon_key=_first_env(KEY_ENV_VARS),
        books_bucket=backend_data.get("books_bucket", "books"),
    )

    auth_data = data.get("auth") or {}
    auth = AuthConfig(
        admin_email=auth_data.get("admin_email", "admin@example.com"),
        profile_fetch_timeout=float(auth_data.get("profile_fetch_timeout", 3.0)),
        init_timeout=float(auth_data.get("init_timeout", 8.0)),
    )

    storage_data = data.get("storage") or {}
    storage = StorageConfig(
        local_db_path=storage_data.get("local_db_path", "data/studyvault_files.db"),
        local_fallback=bool(storage_data.get("local_fallback", True)),
        max_upload_bytes=int(
            storage_data.get("max_upload_bytes", 200 * 1024 * 1024)
        ),
    )

    ui_data = data.get("ui") or {}
    ui = UIConfig(
        sidebar_breakpoint=int(ui_data.get("sidebar_breakpoint", 1024)),
        default_cover_image=ui_data.get("default_cover_image", DEFAULT_COVER_IMAGE),
        semesters=int(ui_data.get("semesters", 8)),
    )

    return AppConfig(backend=backend, auth=auth, storage=storage, ui=ui)


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data: dict[str, Any]

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)

    if not _cached_config.backend.is_configured:
        logger.warning(
            "backend_not_configured",
            url_set=bool(_cached_config.backend.url),
            key_set=bool(_cached_config.backend.anon_key),
        )

    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when the environment changes at runtime.
    """
    global _cached_config
    _cached_config = None
