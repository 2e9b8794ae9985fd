"""Synchronization defaults for the startup sweeps."""

from __future__ import annotations

from dataclasses import dataclass

from .env import int_env_var

DEFAULT_BACKFILL_BATCH_SIZE = 100
# Discord caps history pages at 100 messages
MAX_BACKFILL_BATCH_SIZE = 100


@dataclass(frozen=True, slots=True)
class SyncConfig:
    backfill_batch_size: int = DEFAULT_BACKFILL_BATCH_SIZE


def get_sync_config() -> SyncConfig:
    batch_size = int_env_var("FOTOGALERIE_BACKFILL_BATCH_SIZE", DEFAULT_BACKFILL_BATCH_SIZE)
    return SyncConfig(backfill_batch_size=min(batch_size, MAX_BACKFILL_BATCH_SIZE))
