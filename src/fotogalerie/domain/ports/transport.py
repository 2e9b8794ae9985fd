"""Ports for the chat transport carrying the source channel."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True, slots=True)
class SourceAttachment:
    url: str
    filename: str = ""
    content_type: str | None = None

    @property
    def is_image(self) -> bool:
        return bool(self.content_type) and self.content_type.startswith("image/")


@dataclass(frozen=True, slots=True)
class SourceMessage:
    """Transport-neutral view of a channel message at the time it was fetched."""

    id: str
    channel_id: str
    author_id: str
    created_at: int
    jump_url: str
    attachments: tuple[SourceAttachment, ...] = ()
    markers: frozenset[str] = field(default_factory=frozenset)
    own_markers: frozenset[str] = field(default_factory=frozenset)

    def attachment_for(self, url: str) -> SourceAttachment | None:
        for attachment in self.attachments:
            if attachment.url == url:
                return attachment
        return None


class MarkerAction(StrEnum):
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True, slots=True)
class ReactionEvent:
    message_id: str
    channel_id: str
    symbol: str
    actor_id: str
    action: MarkerAction


@runtime_checkable
class ChatTransport(Protocol):
    """Request/response operations consumed from the chat platform."""

    @property
    def identity(self) -> str | None: ...

    async def fetch_channel(self, channel_id: str) -> None:
        """Raise ``SourceChannelNotFoundError`` when the channel is unreachable."""
        ...

    async def fetch_history(
        self,
        channel_id: str,
        *,
        limit: int,
        before: str | None = None,
    ) -> Sequence[SourceMessage]:
        """Return up to ``limit`` messages older than ``before``, newest first."""
        ...

    async def fetch_message(self, channel_id: str, message_id: str) -> SourceMessage | None: ...

    async def add_marker(self, message: SourceMessage, symbol: str) -> None: ...

    async def remove_own_marker(self, message: SourceMessage, symbol: str) -> None: ...


__all__ = [
    "ChatTransport",
    "MarkerAction",
    "ReactionEvent",
    "SourceAttachment",
    "SourceMessage",
]
