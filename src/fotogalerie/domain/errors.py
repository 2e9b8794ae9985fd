"""Error taxonomy for the catalog reconciliation engine."""

from __future__ import annotations


class CatalogError(RuntimeError):
    """Base class for recoverable catalog failures."""


class TimestampResolutionError(CatalogError):
    """Raised when no timestamp rule matches and no fallback was supplied."""


class ImageFetchError(CatalogError):
    """Raised by image adapters when a download or decode fails."""

    def __init__(self, message: str, *, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class EntryBuildError(CatalogError):
    """Raised when a catalog entry cannot be built for one attachment."""

    def __init__(self, message: str, *, source_url: str) -> None:
        super().__init__(message)
        self.source_url = source_url


class TransportError(CatalogError):
    """Raised when the chat transport fails to answer a request."""


class SourceChannelNotFoundError(TransportError):
    """Raised when the configured source channel cannot be located."""

    def __init__(self, channel_id: str) -> None:
        super().__init__(f"Source channel {channel_id} not found")
        self.channel_id = channel_id


class MarkerUpdateError(TransportError):
    """Raised when adding or removing a reaction marker fails."""

    def __init__(self, message: str, *, message_id: str, symbol: str) -> None:
        super().__init__(message)
        self.message_id = message_id
        self.symbol = symbol


class SnapshotError(CatalogError):
    """Raised when the durable snapshot cannot be read or written."""


__all__ = [
    "CatalogError",
    "EntryBuildError",
    "ImageFetchError",
    "MarkerUpdateError",
    "SnapshotError",
    "SourceChannelNotFoundError",
    "TimestampResolutionError",
    "TransportError",
]
