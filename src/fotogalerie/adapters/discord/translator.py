"""Translate discord.py objects into transport-neutral domain views."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fotogalerie.config.discord import normalize_symbol
from fotogalerie.domain.ports.transport import (
    MarkerAction,
    ReactionEvent,
    SourceAttachment,
    SourceMessage,
)

if TYPE_CHECKING:
    import discord


def parse_attachment(attachment: discord.Attachment) -> SourceAttachment:
    return SourceAttachment(
        url=attachment.url,
        filename=attachment.filename or "",
        content_type=attachment.content_type,
    )


def parse_message(message: discord.Message) -> SourceMessage:
    markers = frozenset(
        normalize_symbol(str(reaction.emoji)) for reaction in message.reactions if reaction.count
    )
    own_markers = frozenset(
        normalize_symbol(str(reaction.emoji)) for reaction in message.reactions if reaction.me
    )
    return SourceMessage(
        id=str(message.id),
        channel_id=str(message.channel.id),
        author_id=str(message.author.id),
        created_at=int(message.created_at.timestamp() * 1000),
        jump_url=message.jump_url,
        attachments=tuple(parse_attachment(attachment) for attachment in message.attachments),
        markers=markers,
        own_markers=own_markers,
    )


def parse_reaction(payload: discord.RawReactionActionEvent, action: MarkerAction) -> ReactionEvent:
    return ReactionEvent(
        message_id=str(payload.message_id),
        channel_id=str(payload.channel_id),
        symbol=normalize_symbol(str(payload.emoji)),
        actor_id=str(payload.user_id),
        action=action,
    )
