"""Derive the authoritative capture instant of an image from competing hints.

Precedence, first match wins:

1. a ``<PREFIX>_YYYY-MM-DD_HH-MM-SS`` stamp in the filename (camera clock),
2. the hexadecimal ``ex=`` query parameter of the attachment URL (seconds),
3. the creation instant of the message carrying the attachment.

Filename stamps carry no zone. They are read in the process's local timezone
unless ``filename_timezone`` is set, while :func:`format_captured_at` always
renders in UTC.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime, tzinfo
from functools import cached_property
from logging import getLogger

from .errors import TimestampResolutionError

log = getLogger(__name__)

DEFAULT_FILENAME_PREFIX = "VRChat"
READABLE_FORMAT = "%d.%m.%Y-%H:%M:%S"

_URL_EXPIRY_PATTERN = re.compile(r"[?&]ex=([0-9a-fA-F]+)")


@dataclass(frozen=True)
class TimestampResolver:
    filename_prefix: str = DEFAULT_FILENAME_PREFIX
    filename_timezone: tzinfo | None = field(default=None)

    @cached_property
    def _filename_pattern(self) -> re.Pattern[str]:
        return re.compile(
            re.escape(self.filename_prefix)
            + r"_(\d{4})-(\d{2})-(\d{2})_(\d{2})-(\d{2})-(\d{2})"
        )

    def resolve(self, filename: str, source_url: str, fallback: int | None) -> int:
        """Return the capture instant in milliseconds since the epoch."""

        from_filename = self.from_filename(filename)
        if from_filename is not None:
            return from_filename
        from_url = from_source_url(source_url)
        if from_url is not None:
            return from_url
        if fallback is None:
            raise TimestampResolutionError(
                f"No timestamp hint in {filename!r} or {source_url!r} and no fallback"
            )
        return fallback

    def from_filename(self, filename: str) -> int | None:
        """Read the capture time embedded in ``filename``, if any.

        Components that do not form a real calendar date, such as month 13 or
        February 30th, are rejected on purpose. They are not rolled over into
        the next month like a lenient date constructor would, so ``resolve``
        falls through to the URL hint instead.
        """

        match = self._filename_pattern.search(filename or "")
        if match is None:
            return None
        year, month, day, hour, minute, second = (int(group) for group in match.groups())
        try:
            stamp = datetime(year, month, day, hour, minute, second, tzinfo=self.filename_timezone)
        except ValueError:
            log.debug("Ignoring impossible filename timestamp in %s", filename)
            return None
        # naive datetimes are interpreted in local time by timestamp()
        return int(stamp.timestamp()) * 1000


def from_source_url(source_url: str) -> int | None:
    match = _URL_EXPIRY_PATTERN.search(source_url or "")
    if match is None:
        return None
    return int(match.group(1), 16) * 1000


def format_captured_at(captured_at: int) -> str:
    """Render ``DD.MM.YYYY-HH:MM:SS`` in UTC."""

    return datetime.fromtimestamp(captured_at / 1000, tz=UTC).strftime(READABLE_FORMAT)


__all__ = ["TimestampResolver", "format_captured_at", "from_source_url"]
