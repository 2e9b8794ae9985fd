"""Application configuration helpers."""

from __future__ import annotations

from .discord import DiscordConfig, MarkerConfig, get_discord_config, get_marker_config
from .env import require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .images import ImageConfig, get_image_config
from .logging import configure_logging
from .storage import StorageConfig, get_storage_config
from .sync import SyncConfig, get_sync_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DiscordConfig",
    "ImageConfig",
    "MarkerConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "get_discord_config",
    "get_image_config",
    "get_marker_config",
    "get_storage_config",
    "get_sync_config",
    "require_env_vars",
]
