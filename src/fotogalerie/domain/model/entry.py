"""Catalog entry value object."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """One catalog record for a distinct image source.

    Entries are replace-only: the store swaps whole records and never mutates
    them in place. ``source_url`` is the identity.
    """

    source_url: str
    display_url: str
    filename: str
    source_message_id: str
    source_message_url: str
    byte_size: int
    captured_at: int
    captured_at_display: str
    width: int
    height: int

    def __post_init__(self) -> None:
        if not self.source_url:
            raise ValueError("Catalog entries require a source URL")
        for name in ("byte_size", "width", "height"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
