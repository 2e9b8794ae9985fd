from __future__ import annotations

from datetime import UTC

import pytest

from fotogalerie.app import Catalog, build_catalog
from fotogalerie.config import ImageConfig, MarkerConfig, SyncConfig
from tests.helpers.catalog import (
    CHANNEL_ID,
    PROCESSED,
    REMOVAL,
    REMOVAL_ALT,
    FakeImageFetcher,
    FakeTransport,
    MemorySnapshotRepository,
)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def images() -> FakeImageFetcher:
    return FakeImageFetcher()


@pytest.fixture
def repository() -> MemorySnapshotRepository:
    return MemorySnapshotRepository()


@pytest.fixture
def catalog(
    transport: FakeTransport,
    images: FakeImageFetcher,
    repository: MemorySnapshotRepository,
) -> Catalog:
    return build_catalog(
        transport,
        channel_id=CHANNEL_ID,
        images=images,
        repository=repository,
        markers=MarkerConfig(removal=(REMOVAL, REMOVAL_ALT), processed=PROCESSED),
        image_config=ImageConfig(filename_timezone=UTC),
        sync_config=SyncConfig(backfill_batch_size=2),
    )
