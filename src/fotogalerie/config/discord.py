"""Discord connection and marker configuration."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError

DEFAULT_REMOVAL_MARKERS = ("\u274c", "\U0001f5d1")  # cross mark, wastebasket
DEFAULT_PROCESSED_MARKER = "\u2705"  # check mark button
# emoji presentation selector, dropped so user input matches reaction payloads
VARIATION_SELECTOR = "\ufe0f"


@dataclass(frozen=True, slots=True)
class MarkerConfig:
    """Reaction symbols driving soft delete/restore."""

    removal: tuple[str, ...] = DEFAULT_REMOVAL_MARKERS
    processed: str = DEFAULT_PROCESSED_MARKER

    def __post_init__(self) -> None:
        if not self.removal:
            raise ConfigurationError("At least one removal marker is required")
        if self.processed in self.removal:
            raise ConfigurationError("Processed marker must differ from the removal markers")


@dataclass(frozen=True, slots=True)
class DiscordConfig:
    """Holds Discord bot configuration values."""

    token: str
    channel_id: int
    markers: MarkerConfig = MarkerConfig()

    def __repr__(self) -> str:
        return f"DiscordConfig(token='***', channel_id={self.channel_id}, markers={self.markers!r})"


def normalize_symbol(symbol: str) -> str:
    """Strip ``symbol`` and drop emoji presentation selectors so ``🗑️`` equals ``🗑``."""

    return symbol.strip().replace(VARIATION_SELECTOR, "")


def _parse_channel_id(raw: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"DISCORD_CHANNEL_ID must be numeric, got {raw!r}") from exc


def get_marker_config() -> MarkerConfig:
    removal_raw = optional_env_var("FOTOGALERIE_REMOVAL_MARKERS")
    processed_raw = optional_env_var("FOTOGALERIE_PROCESSED_MARKER")
    processed = normalize_symbol(processed_raw or DEFAULT_PROCESSED_MARKER)
    if removal_raw is None:
        return MarkerConfig(processed=processed)
    removal = tuple(normalize_symbol(symbol) for symbol in removal_raw.split(",") if symbol.strip())
    if len(removal) != len(DEFAULT_REMOVAL_MARKERS):
        raise ConfigurationError(
            f"FOTOGALERIE_REMOVAL_MARKERS must name exactly {len(DEFAULT_REMOVAL_MARKERS)} symbols"
        )
    return MarkerConfig(removal=removal, processed=processed)


def get_discord_config() -> DiscordConfig:
    values = require_env_vars(("DISCORD_BOT_TOKEN", "DISCORD_CHANNEL_ID"))
    return DiscordConfig(
        token=values["DISCORD_BOT_TOKEN"],
        channel_id=_parse_channel_id(values["DISCORD_CHANNEL_ID"]),
        markers=get_marker_config(),
    )
