"""Image downloads over resilient HTTP and dimension extraction with Pillow."""

from __future__ import annotations

from dataclasses import dataclass, field
from io import BytesIO
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from PIL import Image, UnidentifiedImageError

from fotogalerie.adapters.http_resilience import ResilientClient
from fotogalerie.config.images import ImageConfig
from fotogalerie.domain.errors import ImageFetchError
from fotogalerie.domain.ports.images import Dimensions, ImageFetcher

if TYPE_CHECKING:
    from collections.abc import Callable

    from fotogalerie.config.http_resilience import ResilienceConfig

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class HttpImageFetcher:
    config: ImageConfig = field(default_factory=ImageConfig)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _client: ResilientClient | None = field(default=None, init=False, repr=False)

    async def download(self, url: str) -> bytes:
        client = self._ensure_client()
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ImageFetchError(
                f"Download of {url} failed with status {exc.response.status_code}", url=url
            ) from exc
        except httpx.HTTPError as exc:
            raise ImageFetchError(f"Download of {url} failed: {exc}", url=url) from exc
        return response.content

    def extract_dimensions(self, data: bytes) -> Dimensions:
        try:
            with Image.open(BytesIO(data)) as image:
                width, height = image.size
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
            raise ImageFetchError(f"Unreadable image data ({len(data)} bytes): {exc}") from exc
        return Dimensions(width=width, height=height)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> ResilientClient:
        if self._client is None:
            log.debug("Opening HTTP client %s", self.config.resilience.name)
            self._client = self.client_factory(self.config.resilience)
        return self._client


if TYPE_CHECKING:
    _fetcher_check: ImageFetcher = HttpImageFetcher()
