"""The authoritative in-memory catalog and its durable snapshot."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import SnapshotError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .model import CatalogEntry
    from .ports.persistence import SnapshotRepository

log = getLogger(__name__)


class CatalogStore:
    """Keyed collection of catalog entries with a single mutation interface.

    Entries are keyed by ``source_url``. Every mutation schedules a full rewrite
    of the snapshot; at most one write is in flight and mutations made while a
    write runs are folded into one follow-up write. The in-memory collection is
    always the authority, the persisted file lags by at most one pending write.
    """

    def __init__(self, repository: SnapshotRepository) -> None:
        self._repository = repository
        self._entries: dict[str, CatalogEntry] = {}
        self._dirty = False
        self._writer: asyncio.Task[None] | None = None

    def __len__(self) -> int:
        return len(self._entries)

    def load(self) -> int:
        """Seed the collection from the persisted snapshot without rewriting it."""

        entries = self._repository.load()
        self._entries = {}
        for entry in entries:
            self._entries.setdefault(entry.source_url, entry)
        log.info("Loaded %s catalog entries from snapshot", len(self._entries))
        return len(self._entries)

    def contains_url(self, source_url: str) -> bool:
        return source_url in self._entries

    def get(self, source_url: str) -> CatalogEntry | None:
        return self._entries.get(source_url)

    def upsert(self, entry: CatalogEntry) -> bool:
        """Add ``entry`` unless its source URL is already known."""

        if entry.source_url in self._entries:
            return False
        self._entries[entry.source_url] = entry
        self._schedule_write()
        return True

    def remove_by_url(self, source_url: str) -> CatalogEntry | None:
        removed = self._entries.pop(source_url, None)
        if removed is not None:
            self._schedule_write()
        return removed

    def replace_all(self, entries: Iterable[CatalogEntry]) -> None:
        replacement: dict[str, CatalogEntry] = {}
        for entry in entries:
            replacement.setdefault(entry.source_url, entry)
        self._entries = replacement
        self._schedule_write()

    def snapshot(self) -> list[CatalogEntry]:
        """Entries newest first; equal timestamps keep insertion order."""

        return sorted(self._entries.values(), key=lambda entry: entry.captured_at, reverse=True)

    async def flush(self) -> None:
        """Wait until every scheduled write has been attempted."""

        while self._writer is not None and not self._writer.done():
            await self._writer

    async def persist_now(self) -> None:
        """Write the current snapshot once more, logging instead of raising.

        The write goes through the writer task, so it never overlaps another
        write and mutations made meanwhile are picked up by a follow-up write.
        """

        self._schedule_write()
        await self.flush()

    def _schedule_write(self) -> None:
        self._dirty = True
        if self._writer is None or self._writer.done():
            loop = asyncio.get_running_loop()
            self._writer = loop.create_task(self._drain(), name="catalog-snapshot-writer")

    async def _drain(self) -> None:
        while self._dirty:
            self._dirty = False
            await self._write(self.snapshot())

    async def _write(self, entries: list[CatalogEntry]) -> None:
        try:
            await self._repository.write(entries)
        except SnapshotError:
            log.exception("Failed to persist catalog snapshot (%s entries)", len(entries))
        else:
            log.debug("Persisted catalog snapshot (%s entries)", len(entries))
