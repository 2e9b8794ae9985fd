"""Gateway client forwarding Discord events to the catalog."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import discord

from fotogalerie.domain.errors import SourceChannelNotFoundError, TransportError
from fotogalerie.domain.ports.transport import MarkerAction

from .translator import parse_message, parse_reaction
from .transport import DiscordTransport

if TYPE_CHECKING:
    from collections.abc import Callable

    from fotogalerie.app import Catalog
    from fotogalerie.domain.ports.transport import ChatTransport

log = getLogger(__name__)


def build_intents() -> discord.Intents:
    intents = discord.Intents.default()
    intents.message_content = True
    return intents


class CatalogBot(discord.Client):
    """Runs the startup sweeps once, then feeds live events to the catalog."""

    def __init__(
        self,
        catalog_factory: Callable[[ChatTransport], Catalog],
        *,
        intents: discord.Intents | None = None,
    ) -> None:
        super().__init__(intents=intents or build_intents())
        self.catalog = catalog_factory(DiscordTransport(self))
        self._started = False
        self.startup_error: SourceChannelNotFoundError | None = None

    async def on_ready(self) -> None:
        # on_ready fires again after every gateway reconnect
        if self._started:
            return
        self._started = True
        log.info("Discord bot is ready as %s", self.user)
        try:
            await self.catalog.startup()
        except SourceChannelNotFoundError as exc:
            self.startup_error = exc
            log.critical("Source channel %s is unavailable, shutting down", self.catalog.channel_id)
            await self.close()
        except TransportError:
            log.exception("Startup sweeps failed, serving live events without them")

    async def on_message(self, message: discord.Message) -> None:
        if str(message.channel.id) != self.catalog.channel_id or not message.attachments:
            return
        await self.catalog.ingestor.handle_message(parse_message(message))

    async def on_raw_reaction_add(self, payload: discord.RawReactionActionEvent) -> None:
        await self.catalog.tombstones.handle(parse_reaction(payload, MarkerAction.ADDED))

    async def on_raw_reaction_remove(self, payload: discord.RawReactionActionEvent) -> None:
        await self.catalog.tombstones.handle(parse_reaction(payload, MarkerAction.REMOVED))
