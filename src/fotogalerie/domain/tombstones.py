"""Reaction-driven soft delete and restore of catalog entries.

Each message carries a small set of markers. Removal markers are placed by
people and mean "keep this out of the catalog"; the processed marker is placed
by the bot and means "this attachment is in the catalog". The transitions are:

* removal marker added    -> remove the message's entries, retract processed
* removal marker removed  -> rebuild missing entries, re-apply processed

Removal markers are never retracted by the bot; they stay as an audit trail.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import EntryBuildError, MarkerUpdateError, TransportError
from .ports.transport import MarkerAction

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from .catalog import CatalogStore
    from .codec import EntryCodec
    from .ports.transport import ChatTransport, ReactionEvent, SourceMessage

log = getLogger(__name__)


@dataclass(slots=True)
class TombstoneManager:
    store: CatalogStore
    codec: EntryCodec
    transport: ChatTransport
    channel_id: str
    removal_markers: frozenset[str]
    processed_marker: str
    _tombstoned: set[str] = field(default_factory=set, init=False, repr=False)

    def is_tombstoned(self, message: SourceMessage) -> bool:
        """True when the message view or a later handled event carries a removal marker.

        Removal events handled after ``message`` was fetched still count, so
        work started from an older view cannot resurrect a tombstoned entry.
        """

        if message.id in self._tombstoned:
            return True
        return not self.removal_markers.isdisjoint(message.markers)

    async def handle(self, event: ReactionEvent) -> None:
        if event.channel_id != self.channel_id or event.symbol not in self.removal_markers:
            return
        if event.actor_id == self.transport.identity:
            return

        transitions: dict[MarkerAction, Callable[[SourceMessage], Awaitable[None]]] = {
            MarkerAction.ADDED: self.retract,
            MarkerAction.REMOVED: self.restore,
        }
        if event.action is MarkerAction.ADDED:
            self._tombstoned.add(event.message_id)
        message = await self._locate(event)
        if event.action is MarkerAction.REMOVED and (
            message is None or self.removal_markers.isdisjoint(message.markers)
        ):
            self._tombstoned.discard(event.message_id)
        if message is None:
            return
        await transitions[event.action](message)

    async def retract(self, message: SourceMessage) -> None:
        removed = [
            attachment.url
            for attachment in message.attachments
            if self.store.remove_by_url(attachment.url) is not None
        ]
        if removed:
            log.info("Removed %s entries for message %s: %s", len(removed), message.id, removed)
        if removed or self.processed_marker in message.own_markers:
            await self._unmark(message)

    async def restore(self, message: SourceMessage) -> None:
        if self.is_tombstoned(message):
            log.info("Message %s still carries a removal marker, not restoring", message.id)
            return

        represented = False
        for attachment in message.attachments:
            if self.store.contains_url(attachment.url):
                represented = True
                continue
            try:
                entry = await self.codec.build(attachment, message)
            except EntryBuildError:
                log.warning(
                    "Could not restore %s from message %s",
                    attachment.url,
                    message.id,
                    exc_info=True,
                )
                continue
            if entry is None:
                continue
            if self.store.upsert(entry):
                log.info("Restored %s from message %s", entry.source_url, message.id)
            represented = True

        if represented:
            await self.mark_processed(message)

    async def mark_processed(self, message: SourceMessage) -> SourceMessage:
        """Apply the processed marker once, unless a removal marker is present.

        Returns the message view updated with the marker so callers handling
        several attachments of one message avoid redundant round-trips.
        """

        if self.is_tombstoned(message) or self.processed_marker in message.own_markers:
            return message
        try:
            await self.transport.add_marker(message, self.processed_marker)
        except MarkerUpdateError:
            log.warning("Could not mark message %s as processed", message.id, exc_info=True)
            return message
        return replace(
            message,
            markers=message.markers | {self.processed_marker},
            own_markers=message.own_markers | {self.processed_marker},
        )

    async def _unmark(self, message: SourceMessage) -> None:
        try:
            await self.transport.remove_own_marker(message, self.processed_marker)
        except MarkerUpdateError:
            log.warning("Could not retract processed marker from %s", message.id, exc_info=True)

    async def _locate(self, event: ReactionEvent) -> SourceMessage | None:
        try:
            message = await self.transport.fetch_message(event.channel_id, event.message_id)
        except TransportError:
            log.warning(
                "Could not fetch message %s for %s event",
                event.message_id,
                event.action,
                exc_info=True,
            )
            return None
        if message is None:
            log.info(
                "Message %s vanished before its %s event was handled",
                event.message_id,
                event.action,
            )
        return message
