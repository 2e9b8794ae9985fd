"""One-shot backfill of the catalog from the channel history."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import EntryBuildError, SourceChannelNotFoundError, TransportError

if TYPE_CHECKING:
    from .catalog import CatalogStore
    from .codec import EntryCodec
    from .ports.transport import ChatTransport, SourceMessage
    from .tombstones import TombstoneManager

log = getLogger(__name__)

DEFAULT_BATCH_SIZE = 100


@dataclass(slots=True)
class BackfillScanner:
    """Page backwards through the channel history and catalog unseen images.

    Re-running the scan is safe: known source URLs are only re-marked, so a
    second pass over an unchanged history adds nothing.
    """

    store: CatalogStore
    codec: EntryCodec
    tombstones: TombstoneManager
    transport: ChatTransport
    batch_size: int = DEFAULT_BATCH_SIZE

    async def scan(self, channel_id: str) -> int:
        """Return how many entries were added.

        A transport failure while paging ends the scan early with what was
        processed so far; a missing channel is raised.
        """

        log.info("Fetching channel history for %s", channel_id)
        await self.transport.fetch_channel(channel_id)

        processed = 0
        pages = 0
        before: str | None = None
        while True:
            try:
                batch = await self.transport.fetch_history(
                    channel_id, limit=self.batch_size, before=before
                )
            except SourceChannelNotFoundError:
                raise
            except TransportError:
                log.exception(
                    "History page before %s failed, stopping backfill after %s pages",
                    before,
                    pages,
                )
                break
            if not batch:
                break
            pages += 1
            for message in batch:
                processed += await self._process_message(message)
            before = batch[-1].id
            log.debug("Backfill page %s done, cursor=%s, processed=%s", pages, before, processed)

        log.info("Channel history processing complete: pages=%s, processed=%s", pages, processed)
        return processed

    async def _process_message(self, message: SourceMessage) -> int:
        processed = 0
        for attachment in message.attachments:
            if not attachment.is_image:
                continue
            if self.store.contains_url(attachment.url):
                message = await self.tombstones.mark_processed(message)
                continue
            if self.tombstones.is_tombstoned(message):
                log.debug("Skipping %s, message %s is tombstoned", attachment.url, message.id)
                continue
            try:
                entry = await self.codec.build(attachment, message)
            except EntryBuildError as exc:
                log.error("Error processing historical image %s: %s", exc.source_url, exc)
                continue
            if entry is None or self.tombstones.is_tombstoned(message):
                continue
            if self.store.upsert(entry):
                processed += 1
            message = await self.tombstones.mark_processed(message)
        return processed
