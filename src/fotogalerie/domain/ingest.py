"""Live ingestion of newly posted messages."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import EntryBuildError

if TYPE_CHECKING:
    from .catalog import CatalogStore
    from .codec import EntryCodec
    from .ports.transport import SourceMessage
    from .tombstones import TombstoneManager

log = getLogger(__name__)


@dataclass(slots=True)
class LiveIngestor:
    store: CatalogStore
    codec: EntryCodec
    tombstones: TombstoneManager
    channel_id: str

    async def handle_message(self, message: SourceMessage) -> int:
        """Catalog every image attachment of ``message``; return how many were added."""

        if message.channel_id != self.channel_id:
            return 0

        added = 0
        for attachment in message.attachments:
            try:
                entry = await self.codec.build(attachment, message)
            except EntryBuildError as exc:
                log.error(
                    "Error processing image %s from message %s: %s",
                    exc.source_url,
                    message.id,
                    exc,
                )
                continue
            if entry is None:
                continue
            if self.tombstones.is_tombstoned(message):
                log.info(
                    "Dropping %s, message %s was tombstoned meanwhile",
                    entry.source_url,
                    message.id,
                )
                continue
            log.info("Processing image: %s", entry.source_url)
            if self.store.upsert(entry):
                added += 1
            message = await self.tombstones.mark_processed(message)
        return added
