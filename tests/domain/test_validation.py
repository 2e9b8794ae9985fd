from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from fotogalerie.domain.errors import SourceChannelNotFoundError
from fotogalerie.domain.validation import EvictionReason
from tests.helpers.catalog import (
    CHANNEL_ID,
    PROCESSED,
    REMOVAL,
    image_attachment,
    make_message,
)

if TYPE_CHECKING:
    from fotogalerie.app import Catalog
    from fotogalerie.domain.ports.transport import SourceMessage
    from fotogalerie.domain.validation import ValidationResult
    from tests.helpers.catalog import FakeTransport, MemorySnapshotRepository


def _catalog_messages(catalog: Catalog, transport: FakeTransport, *ids: str) -> dict[str, str]:
    urls = {}
    for message_id in ids:
        attachment = image_attachment(f"VRChat_2023-05-0{message_id}_12-00-00.png")
        transport.messages[message_id] = make_message(message_id, attachment)
        urls[message_id] = attachment.url

    async def scenario() -> None:
        await catalog.backfill.scan(CHANNEL_ID)
        await catalog.store.flush()

    asyncio.run(scenario())
    return urls


def _validate(catalog: Catalog) -> ValidationResult:
    async def scenario() -> ValidationResult:
        result = await catalog.validator.validate(CHANNEL_ID)
        await catalog.store.flush()
        return result

    return asyncio.run(scenario())


def test_deleted_message_is_evicted(
    catalog: Catalog,
    transport: FakeTransport,
    repository: MemorySnapshotRepository,
) -> None:
    urls = _catalog_messages(catalog, transport, "1", "2")
    transport.delete("1")
    writes_before = len(repository.writes)

    result = _validate(catalog)

    assert result.evicted == {urls["1"]: EvictionReason.MESSAGE_MISSING}
    assert result.kept == 1
    assert len(repository.writes) == writes_before + 1
    assert [entry.source_url for entry in repository.last] == [urls["2"]]


def test_removed_attachment_is_evicted(catalog: Catalog, transport: FakeTransport) -> None:
    urls = _catalog_messages(catalog, transport, "1")
    transport.messages["1"] = make_message("1", image_attachment("replacement.png"))

    result = _validate(catalog)

    assert result.evicted == {urls["1"]: EvictionReason.ATTACHMENT_MISSING}
    assert len(catalog.store) == 0


def test_tombstoned_entry_is_evicted(catalog: Catalog, transport: FakeTransport) -> None:
    urls = _catalog_messages(catalog, transport, "1", "2")
    transport.user_reacts("2", REMOVAL)

    result = _validate(catalog)

    assert result.evicted == {urls["2"]: EvictionReason.TOMBSTONED}
    assert catalog.store.contains_url(urls["1"])


def test_unreachable_message_keeps_entry_unverified(
    catalog: Catalog,
    transport: FakeTransport,
    repository: MemorySnapshotRepository,
) -> None:
    urls = _catalog_messages(catalog, transport, "1")
    transport.unreachable.add("1")
    writes_before = len(repository.writes)

    result = _validate(catalog)

    assert (result.kept, result.unverified, result.evicted) == (0, 1, {})
    assert catalog.store.contains_url(urls["1"])
    assert len(repository.writes) == writes_before


def test_survivors_are_re_marked(catalog: Catalog, transport: FakeTransport) -> None:
    _catalog_messages(catalog, transport, "1", "2")
    transport.messages["1"] = make_message("1", *transport.messages["1"].attachments)
    transport.added.clear()

    result = _validate(catalog)

    assert result.kept == 2
    assert transport.added == [("1", PROCESSED)]


def test_clean_catalog_is_not_rewritten(
    catalog: Catalog,
    transport: FakeTransport,
    repository: MemorySnapshotRepository,
) -> None:
    _catalog_messages(catalog, transport, "1", "2", "3")
    writes_before = len(repository.writes)

    result = _validate(catalog)

    assert result.kept == 3
    assert result.evicted == {}
    assert len(repository.writes) == writes_before


def test_missing_channel_aborts_without_evicting(
    catalog: Catalog,
    transport: FakeTransport,
    repository: MemorySnapshotRepository,
) -> None:
    urls = _catalog_messages(catalog, transport, "1", "2")
    transport.channels.clear()
    writes_before = len(repository.writes)

    with pytest.raises(SourceChannelNotFoundError):
        _validate(catalog)

    assert all(catalog.store.contains_url(url) for url in urls.values())
    assert len(repository.writes) == writes_before
    assert len(repository.last) == 2


def test_channel_vanishing_mid_sweep_aborts(
    catalog: Catalog,
    transport: FakeTransport,
    repository: MemorySnapshotRepository,
) -> None:
    urls = _catalog_messages(catalog, transport, "1", "2")
    transport.delete("1")
    fetch_message = transport.fetch_message

    async def fetch_then_lose_channel(channel_id: str, message_id: str) -> SourceMessage | None:
        message = await fetch_message(channel_id, message_id)
        transport.channels.clear()
        return message

    transport.fetch_message = fetch_then_lose_channel  # type: ignore[method-assign]

    with pytest.raises(SourceChannelNotFoundError):
        _validate(catalog)

    assert all(catalog.store.contains_url(url) for url in urls.values())
    assert len(repository.last) == 2
