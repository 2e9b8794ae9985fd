"""JSON file holding the full catalog snapshot."""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from fotogalerie.domain.errors import SnapshotError
from fotogalerie.domain.ports.persistence import SnapshotRepository

from .schema import SnapshotDocument, SnapshotRecord

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from fotogalerie.domain.model import CatalogEntry

log = getLogger(__name__)


@dataclass(slots=True)
class JsonSnapshotRepository:
    """Rewrites the whole document on every write via a temp file and rename."""

    path: Path
    indent: int = 2

    def load(self) -> list[CatalogEntry]:
        if not self.path.exists():
            log.info("No catalog snapshot at %s, starting empty", self.path)
            return []
        try:
            records = SnapshotDocument.validate_json(self.path.read_bytes())
        except OSError as exc:
            raise SnapshotError(f"Cannot read snapshot {self.path}: {exc}") from exc
        except ValidationError as exc:
            raise SnapshotError(f"Malformed snapshot {self.path}: {exc}") from exc
        return [record.to_entry() for record in records]

    async def write(self, entries: Sequence[CatalogEntry]) -> None:
        records = [SnapshotRecord.from_entry(entry) for entry in entries]
        payload = SnapshotDocument.dump_json(records, by_alias=True, indent=self.indent)
        try:
            await asyncio.to_thread(self._replace, payload)
        except OSError as exc:
            raise SnapshotError(f"Cannot write snapshot {self.path}: {exc}") from exc
        log.info("Image list saved to %s (%s entries)", self.path, len(records))

    def _replace(self, payload: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        tmp_path.write_bytes(payload)
        os.replace(tmp_path, self.path)


if TYPE_CHECKING:
    _repository_check: SnapshotRepository = JsonSnapshotRepository(Path("image-list.json"))
