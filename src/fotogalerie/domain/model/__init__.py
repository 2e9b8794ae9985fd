from __future__ import annotations

from .entry import CatalogEntry

__all__ = ["CatalogEntry"]
