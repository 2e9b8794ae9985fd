"""Public interface for the JSON snapshot adapter."""

from __future__ import annotations

from .repository import JsonSnapshotRepository
from .schema import SnapshotDocument, SnapshotRecord

__all__ = ["JsonSnapshotRepository", "SnapshotDocument", "SnapshotRecord"]
