"""Public interface for the Discord adapter."""

from __future__ import annotations

from .bot import CatalogBot, build_intents
from .translator import normalize_symbol, parse_message, parse_reaction
from .transport import DiscordTransport

__all__ = [
    "CatalogBot",
    "DiscordTransport",
    "build_intents",
    "normalize_symbol",
    "parse_message",
    "parse_reaction",
]
