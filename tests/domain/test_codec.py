from __future__ import annotations

import asyncio
from datetime import UTC

import pytest

from fotogalerie.domain.codec import EntryCodec, display_url_for
from fotogalerie.domain.errors import EntryBuildError
from fotogalerie.domain.ports.transport import SourceAttachment
from fotogalerie.domain.timestamps import TimestampResolver
from tests.helpers.catalog import FakeImageFetcher, image_attachment, make_message, ms


def _codec(images: FakeImageFetcher) -> EntryCodec:
    return EntryCodec(images=images, resolver=TimestampResolver(filename_timezone=UTC))


def test_display_url_bounds_resolution_for_discord_hosts() -> None:
    url = "https://media.discordapp.net/attachments/1/2/a.png?ex=1"

    assert display_url_for(url, 1024) == f"{url}&width=1024&height=1024"
    assert display_url_for("https://cdn.discordapp.com/a.png", 512) == (
        "https://cdn.discordapp.com/a.png?width=512&height=512"
    )


def test_display_url_leaves_other_hosts_alone() -> None:
    url = "https://example.com/a.png?ex=1"

    assert display_url_for(url) == url


def test_build_assembles_entry(images: FakeImageFetcher) -> None:
    attachment = image_attachment("VRChat_2023-05-01_12-30-00.png")
    message = make_message("7", attachment)

    entry = asyncio.run(_codec(images).build(attachment, message))

    assert entry is not None
    assert entry.source_url == attachment.url
    assert entry.display_url == f"{attachment.url}&width=2048&height=2048"
    assert entry.filename == "VRChat_2023-05-01_12-30-00.png"
    assert entry.source_message_id == "7"
    assert entry.source_message_url == message.jump_url
    assert entry.captured_at == ms(2023, 5, 1, 12, 30)
    assert entry.captured_at_display == "01.05.2023-12:30:00"
    assert (entry.width, entry.height) == (1920, 1080)
    assert entry.byte_size == len(b"\x89PNG" + entry.display_url.encode())
    assert images.downloads == [entry.display_url]


def test_build_falls_back_to_message_creation_time(images: FakeImageFetcher) -> None:
    attachment = image_attachment("photo.png", url="https://example.com/photo.png")
    message = make_message("7", attachment, created_at=ms(2021, 3, 4, 5, 6, 7))

    entry = asyncio.run(_codec(images).build(attachment, message))

    assert entry is not None
    assert entry.captured_at == ms(2021, 3, 4, 5, 6, 7)


def test_build_skips_non_images(images: FakeImageFetcher) -> None:
    attachment = SourceAttachment(url="https://example.com/notes.txt", content_type="text/plain")
    untyped = SourceAttachment(url="https://example.com/blob")

    codec = _codec(images)

    assert asyncio.run(codec.build(attachment, make_message("1", attachment))) is None
    assert asyncio.run(codec.build(untyped, make_message("1", untyped))) is None
    assert images.downloads == []


def test_download_failure_raises_entry_build_error(images: FakeImageFetcher) -> None:
    attachment = image_attachment("broken.png")
    images.failing.add(attachment.url)

    with pytest.raises(EntryBuildError) as excinfo:
        asyncio.run(_codec(images).build(attachment, make_message("1", attachment)))

    assert excinfo.value.source_url == attachment.url


def test_corrupt_payload_raises_entry_build_error(images: FakeImageFetcher) -> None:
    attachment = image_attachment("corrupt.png")
    images.corrupt.add(attachment.url)

    with pytest.raises(EntryBuildError, match="Unreadable"):
        asyncio.run(_codec(images).build(attachment, make_message("1", attachment)))
