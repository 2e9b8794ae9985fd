"""Domain port definitions for adapters."""

from __future__ import annotations

from .images import Dimensions, ImageFetcher
from .persistence import SnapshotRepository
from .transport import (
    ChatTransport,
    MarkerAction,
    ReactionEvent,
    SourceAttachment,
    SourceMessage,
)

__all__ = [
    "ChatTransport",
    "Dimensions",
    "ImageFetcher",
    "MarkerAction",
    "ReactionEvent",
    "SnapshotRepository",
    "SourceAttachment",
    "SourceMessage",
]
