"""Image download and timestamp derivation settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .env import int_env_var, optional_env_var
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig
from .storage import StorageConfig, get_storage_config

DEFAULT_MAX_RESOLUTION = 2048
DEFAULT_FILENAME_PREFIX = "VRChat"
IMAGE_TIMEOUT_SECONDS = 20.0
# cached downloads let restorations skip the network
IMAGE_CACHE_TTL_SECONDS = 24 * 60 * 60.0


def _default_resilience(storage: StorageConfig | None = None) -> ResilienceConfig:
    sqlite_path = str(storage.http_cache_path()) if storage is not None else None
    return ResilienceConfig(
        name="images",
        timeout_seconds=IMAGE_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        cache=CacheConfig(
            backend="sqlite" if sqlite_path else "memory",
            sqlite_path=sqlite_path,
            default_ttl_seconds=IMAGE_CACHE_TTL_SECONDS,
        ),
    )


@dataclass(frozen=True, slots=True)
class ImageConfig:
    max_resolution: int = DEFAULT_MAX_RESOLUTION
    filename_prefix: str = DEFAULT_FILENAME_PREFIX
    filename_timezone: tzinfo | None = None
    resilience: ResilienceConfig = field(default_factory=_default_resilience)


def _parse_timezone(name: str | None) -> ZoneInfo | None:
    if name is None:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown FOTOGALERIE_FILENAME_TIMEZONE: {name!r}") from exc


def get_image_config(*, storage: StorageConfig | None = None) -> ImageConfig:
    return ImageConfig(
        max_resolution=int_env_var("FOTOGALERIE_MAX_RESOLUTION", DEFAULT_MAX_RESOLUTION),
        filename_prefix=optional_env_var("FOTOGALERIE_FILENAME_PREFIX") or DEFAULT_FILENAME_PREFIX,
        filename_timezone=_parse_timezone(optional_env_var("FOTOGALERIE_FILENAME_TIMEZONE")),
        resilience=_default_resilience(storage or get_storage_config()),
    )
