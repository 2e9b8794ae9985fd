"""Reconcile the catalog against the current state of the source channel."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import SourceChannelNotFoundError, TransportError

if TYPE_CHECKING:
    from .catalog import CatalogStore
    from .model import CatalogEntry
    from .ports.transport import ChatTransport, SourceMessage
    from .tombstones import TombstoneManager

log = getLogger(__name__)


class EvictionReason(StrEnum):
    MESSAGE_MISSING = "message missing"
    ATTACHMENT_MISSING = "attachment missing"
    TOMBSTONED = "removal marker present"


@dataclass(slots=True)
class ValidationResult:
    kept: int = 0
    unverified: int = 0
    evicted: dict[str, EvictionReason] = field(default_factory=dict)


@dataclass(slots=True)
class Validator:
    store: CatalogStore
    tombstones: TombstoneManager
    transport: ChatTransport

    async def validate(self, channel_id: str) -> ValidationResult:
        """Evict entries the channel no longer supports; re-mark the rest.

        Entries whose message cannot be fetched because of a transport failure
        are kept unverified. A missing channel aborts the sweep with
        ``SourceChannelNotFoundError`` before anything is evicted. Evictions are
        applied with a single ``replace_all``.
        """

        await self.transport.fetch_channel(channel_id)

        result = ValidationResult()
        messages: dict[str, SourceMessage | None] = {}
        entries = self.store.snapshot()
        log.info("Validating %s catalog entries", len(entries))

        for entry in entries:
            message_id = entry.source_message_id
            if message_id not in messages:
                try:
                    messages[message_id] = await self.transport.fetch_message(
                        channel_id, message_id
                    )
                except SourceChannelNotFoundError:
                    raise
                except TransportError:
                    log.warning(
                        "Could not verify %s, message %s unavailable",
                        entry.source_url,
                        message_id,
                        exc_info=True,
                    )
                    result.unverified += 1
                    continue

            message = messages[message_id]
            reason = self._eviction_reason(entry, message)
            if reason is not None:
                log.info("Evicting %s: %s", entry.source_url, reason)
                result.evicted[entry.source_url] = reason
                continue

            result.kept += 1
            if message is not None:
                messages[message_id] = await self.tombstones.mark_processed(message)

        if result.evicted:
            survivors = [
                entry for entry in self.store.snapshot() if entry.source_url not in result.evicted
            ]
            self.store.replace_all(survivors)

        log.info(
            "Validation finished: kept=%s, evicted=%s, unverified=%s",
            result.kept,
            len(result.evicted),
            result.unverified,
        )
        return result

    def _eviction_reason(
        self,
        entry: CatalogEntry,
        message: SourceMessage | None,
    ) -> EvictionReason | None:
        if message is None:
            return EvictionReason.MESSAGE_MISSING
        if message.attachment_for(entry.source_url) is None:
            return EvictionReason.ATTACHMENT_MISSING
        if self.tombstones.is_tombstoned(message):
            return EvictionReason.TOMBSTONED
        return None
