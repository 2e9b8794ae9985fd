from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING

import pytest

from fotogalerie.adapters.json_snapshot import JsonSnapshotRepository
from fotogalerie.domain.catalog import CatalogStore
from fotogalerie.domain.errors import SnapshotError
from tests.helpers.catalog import make_entry

if TYPE_CHECKING:
    from pathlib import Path


def test_write_uses_published_field_names(tmp_path: Path) -> None:
    path = tmp_path / "image-list.json"
    repository = JsonSnapshotRepository(path)

    asyncio.run(repository.write([make_entry("https://cdn/a.png", captured_at=5)]))

    document = json.loads(path.read_text(encoding="utf-8"))
    assert document == [
        {
            "sourceUrl": "https://cdn/a.png",
            "displayUrl": "https://cdn/a.png",
            "filename": "",
            "sourceMessageId": "1",
            "sourceMessageUrl": "https://discord.com/channels/1/100/1",
            "byteSize": 1,
            "capturedAt": 5,
            "capturedAtDisplay": "",
            "width": 1,
            "height": 1,
        }
    ]
    assert not (tmp_path / ".image-list.json.tmp").exists()


def test_store_persists_newest_first_and_reloads(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "image-list.json"

    async def scenario() -> None:
        store = CatalogStore(JsonSnapshotRepository(path))
        store.upsert(make_entry("old", captured_at=1))
        store.upsert(make_entry("new", captured_at=9))
        await store.flush()

    asyncio.run(scenario())

    document = json.loads(path.read_text(encoding="utf-8"))
    assert [record["sourceUrl"] for record in document] == ["new", "old"]

    reloaded = CatalogStore(JsonSnapshotRepository(path))
    assert reloaded.load() == 2
    assert reloaded.get("old") == make_entry("old", captured_at=1)


def test_missing_file_loads_empty(tmp_path: Path) -> None:
    assert JsonSnapshotRepository(tmp_path / "absent.json").load() == []


def test_unknown_fields_are_ignored(tmp_path: Path) -> None:
    path = tmp_path / "image-list.json"
    path.write_text(
        json.dumps(
            [
                {
                    "sourceUrl": "a",
                    "displayUrl": "a",
                    "sourceMessageId": "1",
                    "sourceMessageUrl": "u",
                    "byteSize": 3,
                    "capturedAt": 2,
                    "capturedAtDisplay": "",
                    "legacy": True,
                }
            ]
        ),
        encoding="utf-8",
    )

    (entry,) = JsonSnapshotRepository(path).load()

    assert entry.source_url == "a"
    assert (entry.width, entry.height) == (0, 0)


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        '{"sourceUrl": "a"}',
        '[{"sourceUrl": "a"}]',
        '[{"sourceUrl": "", "byteSize": -1}]',
    ],
)
def test_malformed_snapshot_raises(tmp_path: Path, content: str) -> None:
    path = tmp_path / "image-list.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(SnapshotError):
        JsonSnapshotRepository(path).load()


def test_unwritable_target_raises_snapshot_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    repository = JsonSnapshotRepository(blocker / "image-list.json")

    with pytest.raises(SnapshotError):
        asyncio.run(repository.write([]))
