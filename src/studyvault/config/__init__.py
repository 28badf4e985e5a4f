"""Configuration package for StudyVault."""

from studyvault.config.app_config import (
    AppConfig,
    AuthConfig,
    BackendConfig,
    StorageConfig,
    UIConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "AuthConfig",
    "BackendConfig",
    "StorageConfig",
    "UIConfig",
    "clear_config_cache",
    "load_app_config",
]
