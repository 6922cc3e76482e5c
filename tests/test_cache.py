import asyncio

from PIL import Image

from meme_viewer.infrastructure.cache import ImageCache
from meme_viewer.models import Result


KEY = ("1", "http://x/cat.png")


def test_get_and_put():
    cache = ImageCache()
    image = Image.new("RGB", (2, 2))

    assert cache.get(KEY) is None
    cache.put(KEY, image)

    assert cache.get(KEY) is image
    assert KEY in cache
    assert len(cache) == 1


def test_get_or_start_reuses_running_task():
    cache = ImageCache()
    started = []

    async def load():
        started.append(True)
        await asyncio.sleep(0)
        return Result.success("done")

    async def scenario():
        first = cache.get_or_start(KEY, load)
        second = cache.get_or_start(KEY, load)
        assert first is second
        assert cache.pending == 1
        return await first

    result = asyncio.run(scenario())

    assert result.value == "done"
    assert started == [True]
    assert cache.pending == 0


def test_finished_task_is_forgotten():
    cache = ImageCache()

    async def load():
        return Result.success("done")

    async def scenario():
        first = cache.get_or_start(KEY, load)
        await first
        await asyncio.sleep(0)
        return first, cache.get_or_start(KEY, load)

    first, second = asyncio.run(scenario())

    assert first is not second
