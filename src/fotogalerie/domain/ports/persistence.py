"""Ports for persisting the catalog snapshot."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from fotogalerie.domain.model import CatalogEntry


@runtime_checkable
class SnapshotRepository(Protocol):
    """Durable medium holding the full, ordered catalog snapshot."""

    def load(self) -> list[CatalogEntry]: ...

    async def write(self, entries: Sequence[CatalogEntry]) -> None: ...


__all__ = ["SnapshotRepository"]
