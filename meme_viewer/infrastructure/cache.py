from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Dict, Optional

from PIL import Image

from ..models import CacheKey, Result


ImageResult = Result[Image.Image]
LoadFactory = Callable[[], Awaitable[ImageResult]]


class ImageCache:
    """Resolved images plus the fetches currently running for each key.

    Confined to the event loop that drives it: every method runs without
    suspending, so a lookup followed by an insert cannot interleave with
    another task. Entries are never evicted and failures are never stored.
    """

    def __init__(self) -> None:
        self._entries: Dict[CacheKey, Image.Image] = {}
        self._in_flight: Dict[CacheKey, "asyncio.Task[ImageResult]"] = {}

    def get(self, key: CacheKey) -> Optional[Image.Image]:
        return self._entries.get(key)

    def put(self, key: CacheKey, image: Image.Image) -> None:
        self._entries[key] = image

    def in_flight(self, key: CacheKey) -> "Optional[asyncio.Task[ImageResult]]":
        return self._in_flight.get(key)

    def get_or_start(self, key: CacheKey, factory: LoadFactory) -> "asyncio.Task[ImageResult]":
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._in_flight[key] = task
            task.add_done_callback(lambda done, key=key: self._forget(key, done))
        return task

    def _forget(self, key: CacheKey, task: "asyncio.Task[ImageResult]") -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def pending(self) -> int:
        return len(self._in_flight)
