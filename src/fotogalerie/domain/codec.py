"""Build catalog entries from raw attachments."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from .errors import EntryBuildError, ImageFetchError
from .model import CatalogEntry
from .timestamps import TimestampResolver, format_captured_at

if TYPE_CHECKING:
    from .ports.images import ImageFetcher
    from .ports.transport import SourceAttachment, SourceMessage

log = getLogger(__name__)

DEFAULT_MAX_RESOLUTION = 2048
RESIZABLE_HOSTS = frozenset({"cdn.discordapp.com", "media.discordapp.net"})


def display_url_for(source_url: str, max_resolution: int = DEFAULT_MAX_RESOLUTION) -> str:
    """Bound the served resolution for CDN hosts that resize on request."""

    if urlsplit(source_url).hostname not in RESIZABLE_HOSTS:
        return source_url
    separator = "&" if "?" in source_url else "?"
    return f"{source_url}{separator}width={max_resolution}&height={max_resolution}"


@dataclass(slots=True)
class EntryCodec:
    images: ImageFetcher
    resolver: TimestampResolver = field(default_factory=TimestampResolver)
    max_resolution: int = DEFAULT_MAX_RESOLUTION

    async def build(
        self,
        attachment: SourceAttachment,
        message: SourceMessage,
    ) -> CatalogEntry | None:
        """Return a new entry, or ``None`` when the attachment is not an image.

        Raises ``EntryBuildError`` when the payload cannot be fetched or decoded;
        nothing is produced in that case.
        """

        if not attachment.is_image:
            return None

        display_url = display_url_for(attachment.url, self.max_resolution)
        try:
            payload = await self.images.download(display_url)
            dimensions = self.images.extract_dimensions(payload)
        except ImageFetchError as exc:
            raise EntryBuildError(str(exc), source_url=attachment.url) from exc

        captured_at = self.resolver.resolve(attachment.filename, attachment.url, message.created_at)
        log.debug("Built entry for %s (%s bytes)", attachment.url, len(payload))
        return CatalogEntry(
            source_url=attachment.url,
            display_url=display_url,
            filename=attachment.filename,
            source_message_id=message.id,
            source_message_url=message.jump_url,
            byte_size=len(payload),
            captured_at=captured_at,
            captured_at_display=format_captured_at(captured_at),
            width=dimensions.width,
            height=dimensions.height,
        )
