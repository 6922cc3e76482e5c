"""Image cache loader: returns a meme's image, fetching it at most once per key."""

from __future__ import annotations

import asyncio
import logging

from PIL import Image

from .errors import FetchError
from .imaging import decode_image
from .infrastructure.cache import ImageCache
from .infrastructure.network import HttpFetcher
from .models import Meme, Result

logger = logging.getLogger(__name__)


class ImageCacheLoader:
    def __init__(self, fetcher: HttpFetcher, cache: ImageCache | None = None) -> None:
        self._fetcher = fetcher
        self._cache = cache if cache is not None else ImageCache()

    @property
    def cache(self) -> ImageCache:
        return self._cache

    async def image_for(self, meme: Meme) -> Result[Image.Image]:
        """Return the image for ``meme``.

        A cache hit returns without suspending. On a miss, callers asking for
        the same key share one fetch; cancelling one caller leaves that fetch
        running for the others.
        """

        key = meme.cache_key
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Image cache hit for meme %s", meme.id)
            return Result.success(cached)

        if self._cache.in_flight(key) is None:
            logger.debug("Image cache miss for meme %s, fetching %s", meme.id, meme.url)
        task = self._cache.get_or_start(key, lambda: self._load(meme))
        return await asyncio.shield(task)

    async def _load(self, meme: Meme) -> Result[Image.Image]:
        try:
            data = await self._fetcher.fetch(meme.url)
            image = await asyncio.to_thread(decode_image, data, url=meme.url)
        except FetchError as exc:
            logger.warning("Failed to load image for meme %s: %s", meme.id, exc)
            return Result.failure(exc)
        self._cache.put(meme.cache_key, image)
        return Result.success(image)
