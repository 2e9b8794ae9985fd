"""Ports for downloading and inspecting image payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class Dimensions:
    width: int
    height: int


@runtime_checkable
class ImageFetcher(Protocol):
    """Raise ``ImageFetchError`` on network, status or decode failures."""

    async def download(self, url: str) -> bytes: ...

    def extract_dimensions(self, data: bytes) -> Dimensions: ...


__all__ = ["Dimensions", "ImageFetcher"]
