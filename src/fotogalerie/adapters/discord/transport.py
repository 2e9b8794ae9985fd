"""discord.py implementation of the chat transport port."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import discord

from fotogalerie.domain.errors import (
    MarkerUpdateError,
    SourceChannelNotFoundError,
    TransportError,
)
from fotogalerie.domain.ports.transport import ChatTransport

from .translator import parse_message

if TYPE_CHECKING:
    from collections.abc import Sequence

    from fotogalerie.domain.ports.transport import SourceMessage

log = getLogger(__name__)

MessageChannel = discord.TextChannel | discord.Thread | discord.VoiceChannel


class DiscordTransport:
    """Request/response operations against the Discord HTTP API.

    Works with a logged-in client whether or not the gateway is connected,
    so one-shot sweeps can run without a live session.
    """

    def __init__(self, client: discord.Client) -> None:
        self._client = client
        self._channels: dict[str, MessageChannel] = {}

    @property
    def identity(self) -> str | None:
        user = self._client.user
        return str(user.id) if user is not None else None

    async def fetch_channel(self, channel_id: str) -> None:
        await self._channel(channel_id)

    async def fetch_history(
        self,
        channel_id: str,
        *,
        limit: int,
        before: str | None = None,
    ) -> Sequence[SourceMessage]:
        channel = await self._channel(channel_id)
        cursor = discord.Object(id=int(before)) if before is not None else None
        try:
            messages = [message async for message in channel.history(limit=limit, before=cursor)]
        except discord.HTTPException as exc:
            raise TransportError(f"History fetch in {channel_id} failed: {exc}") from exc
        return [parse_message(message) for message in messages]

    async def fetch_message(self, channel_id: str, message_id: str) -> SourceMessage | None:
        channel = await self._channel(channel_id)
        try:
            message = await channel.fetch_message(int(message_id))
        except discord.NotFound:
            return None
        except discord.HTTPException as exc:
            raise TransportError(f"Fetching message {message_id} failed: {exc}") from exc
        return parse_message(message)

    async def add_marker(self, message: SourceMessage, symbol: str) -> None:
        channel = await self._channel(message.channel_id)
        partial = channel.get_partial_message(int(message.id))
        try:
            await partial.add_reaction(symbol)
        except discord.HTTPException as exc:
            raise MarkerUpdateError(
                f"Adding {symbol} to {message.id} failed: {exc}",
                message_id=message.id,
                symbol=symbol,
            ) from exc

    async def remove_own_marker(self, message: SourceMessage, symbol: str) -> None:
        user = self._client.user
        if user is None:
            raise MarkerUpdateError("Client is not logged in", message_id=message.id, symbol=symbol)
        channel = await self._channel(message.channel_id)
        partial = channel.get_partial_message(int(message.id))
        try:
            await partial.remove_reaction(symbol, user)
        except discord.HTTPException as exc:
            raise MarkerUpdateError(
                f"Removing {symbol} from {message.id} failed: {exc}",
                message_id=message.id,
                symbol=symbol,
            ) from exc

    async def _channel(self, channel_id: str) -> MessageChannel:
        cached = self._channels.get(channel_id)
        if cached is not None:
            return cached
        try:
            channel = self._client.get_channel(int(channel_id)) or await self._client.fetch_channel(
                int(channel_id)
            )
        except (discord.NotFound, discord.Forbidden) as exc:
            raise SourceChannelNotFoundError(channel_id) from exc
        except discord.HTTPException as exc:
            raise TransportError(f"Fetching channel {channel_id} failed: {exc}") from exc
        if not isinstance(channel, MessageChannel):
            log.error("Channel %s is a %s, not a message channel", channel_id, type(channel))
            raise SourceChannelNotFoundError(channel_id)
        self._channels[channel_id] = channel
        return channel


if TYPE_CHECKING:
    _client = discord.Client(intents=discord.Intents.none())
    _transport_check: ChatTransport = DiscordTransport(_client)
