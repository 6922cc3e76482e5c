"""Process-wide meme service: owns the directory and the image cache.

Construct one instance at startup and hand it to whatever presents memes.
All methods must be called from the event loop that owns the instance.
"""

from __future__ import annotations

import logging
from typing import Optional

from PIL import Image

from .directory import MemeDirectoryFetcher
from .images import ImageCacheLoader
from .infrastructure.cache import ImageCache
from .infrastructure.network import HttpFetcher
from .models import DirectoryState, Meme, MemeDirectory, Result

logger = logging.getLogger(__name__)


class MemeService:
    def __init__(
        self,
        fetcher: HttpFetcher | None = None,
        *,
        api_url: str | None = None,
        cache: ImageCache | None = None,
    ) -> None:
        self._fetcher = fetcher or HttpFetcher()
        self._directory_fetcher = MemeDirectoryFetcher(self._fetcher, api_url=api_url)
        self._loader = ImageCacheLoader(self._fetcher, cache)
        self._memes: MemeDirectory = ()
        self._state = DirectoryState.LOADING
        self._last_error: Optional[Exception] = None

    @property
    def memes(self) -> MemeDirectory:
        return self._memes

    @property
    def state(self) -> DirectoryState:
        return self._state

    @property
    def last_error(self) -> Optional[Exception]:
        return self._last_error

    @property
    def cache(self) -> ImageCache:
        return self._loader.cache

    def find(self, meme_id: str) -> Optional[Meme]:
        for meme in self._memes:
            if meme.id == meme_id:
                return meme
        return None

    async def fetch_meme_directory(self) -> Result[MemeDirectory]:
        result = await self._directory_fetcher.fetch_meme_directory()
        if result.ok:
            self._memes = result.value or ()
            self._state = DirectoryState.READY if self._memes else DirectoryState.EMPTY
            self._last_error = None
        else:
            self._last_error = result.error
            # keep whatever a previous fetch loaded
            if self._state is DirectoryState.LOADING:
                self._state = DirectoryState.UNAVAILABLE
        return result

    async def image_for(self, meme: Meme) -> Result[Image.Image]:
        return await self._loader.image_for(meme)

    def close(self) -> None:
        self._fetcher.close()
