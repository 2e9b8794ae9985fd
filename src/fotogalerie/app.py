"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

import discord

from fotogalerie.adapters.discord import CatalogBot, DiscordTransport
from fotogalerie.adapters.images import HttpImageFetcher
from fotogalerie.adapters.json_snapshot import JsonSnapshotRepository
from fotogalerie.config import (
    DiscordConfig,
    ImageConfig,
    MarkerConfig,
    StorageConfig,
    SyncConfig,
    get_discord_config,
    get_image_config,
    get_storage_config,
    get_sync_config,
)
from fotogalerie.domain.backfill import BackfillScanner
from fotogalerie.domain.catalog import CatalogStore
from fotogalerie.domain.codec import EntryCodec
from fotogalerie.domain.errors import SnapshotError
from fotogalerie.domain.ingest import LiveIngestor
from fotogalerie.domain.timestamps import TimestampResolver
from fotogalerie.domain.tombstones import TombstoneManager
from fotogalerie.domain.validation import ValidationResult, Validator

if TYPE_CHECKING:
    from fotogalerie.domain.ports.images import ImageFetcher
    from fotogalerie.domain.ports.persistence import SnapshotRepository
    from fotogalerie.domain.ports.transport import ChatTransport

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Settings:
    discord: DiscordConfig
    storage: StorageConfig
    images: ImageConfig
    sync: SyncConfig


def load_settings() -> Settings:
    storage = get_storage_config()
    return Settings(
        discord=get_discord_config(),
        storage=storage,
        images=get_image_config(storage=storage),
        sync=get_sync_config(),
    )


@dataclass(slots=True)
class SweepResult:
    processed: int
    validation: ValidationResult


@dataclass(slots=True)
class Catalog:
    """The wired reconciliation engine for one source channel."""

    channel_id: str
    store: CatalogStore
    ingestor: LiveIngestor
    tombstones: TombstoneManager
    backfill: BackfillScanner
    validator: Validator

    async def startup(self) -> SweepResult:
        """Backfill, then validate; the validator never sees a half-built catalog."""

        processed = await self.backfill.scan(self.channel_id)
        validation = await self.validator.validate(self.channel_id)
        await self.store.flush()
        log.info(
            "Startup sweeps finished: processed=%s, evicted=%s, entries=%s",
            processed,
            len(validation.evicted),
            len(self.store),
        )
        return SweepResult(processed=processed, validation=validation)

    async def revalidate(self) -> ValidationResult:
        validation = await self.validator.validate(self.channel_id)
        await self.store.flush()
        return validation


def build_catalog(
    transport: ChatTransport,
    *,
    channel_id: str,
    images: ImageFetcher,
    repository: SnapshotRepository,
    markers: MarkerConfig | None = None,
    image_config: ImageConfig | None = None,
    sync_config: SyncConfig | None = None,
) -> Catalog:
    markers = markers or MarkerConfig()
    image_config = image_config or ImageConfig()
    sync_config = sync_config or SyncConfig()

    store = CatalogStore(repository)
    try:
        store.load()
    except SnapshotError:
        log.exception("Ignoring unreadable snapshot, the backfill will rebuild the catalog")

    codec = EntryCodec(
        images=images,
        resolver=TimestampResolver(
            filename_prefix=image_config.filename_prefix,
            filename_timezone=image_config.filename_timezone,
        ),
        max_resolution=image_config.max_resolution,
    )
    tombstones = TombstoneManager(
        store=store,
        codec=codec,
        transport=transport,
        channel_id=channel_id,
        removal_markers=frozenset(markers.removal),
        processed_marker=markers.processed,
    )
    return Catalog(
        channel_id=channel_id,
        store=store,
        ingestor=LiveIngestor(
            store=store, codec=codec, tombstones=tombstones, channel_id=channel_id
        ),
        tombstones=tombstones,
        backfill=BackfillScanner(
            store=store,
            codec=codec,
            tombstones=tombstones,
            transport=transport,
            batch_size=sync_config.backfill_batch_size,
        ),
        validator=Validator(store=store, tombstones=tombstones, transport=transport),
    )


async def serve(settings: Settings | None = None) -> None:
    """Run the gateway bot until it is closed, persisting once more on the way out."""

    settings = settings or load_settings()
    images = HttpImageFetcher(settings.images)
    repository = JsonSnapshotRepository(settings.storage.catalog_path())

    def catalog_factory(transport: ChatTransport) -> Catalog:
        return build_catalog(
            transport,
            channel_id=str(settings.discord.channel_id),
            images=images,
            repository=repository,
            markers=settings.discord.markers,
            image_config=settings.images,
            sync_config=settings.sync,
        )

    bot = CatalogBot(catalog_factory)
    log.info("Starting Discord bot for channel %s", settings.discord.channel_id)
    try:
        async with bot:
            await bot.start(settings.discord.token)
    finally:
        log.info("Saving final image list and shutting down...")
        await bot.catalog.store.persist_now()
        await images.aclose()

    if bot.startup_error is not None:
        raise bot.startup_error


async def sweep(settings: Settings | None = None, *, backfill: bool = True) -> SweepResult:
    """Run the startup sweeps once over the HTTP API, without a gateway session."""

    settings = settings or load_settings()
    images = HttpImageFetcher(settings.images)
    repository = JsonSnapshotRepository(settings.storage.catalog_path())

    async with discord.Client(intents=discord.Intents.none()) as client:
        await client.login(settings.discord.token)
        catalog = build_catalog(
            DiscordTransport(client),
            channel_id=str(settings.discord.channel_id),
            images=images,
            repository=repository,
            markers=settings.discord.markers,
            image_config=settings.images,
            sync_config=settings.sync,
        )
        try:
            if backfill:
                return await catalog.startup()
            return SweepResult(processed=0, validation=await catalog.revalidate())
        finally:
            await catalog.store.flush()
            await images.aclose()
