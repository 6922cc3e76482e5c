from __future__ import annotations

import asyncio
import logging
from typing import Callable

import requests

from ..config import SETTINGS
from ..errors import NetworkError


SessionFactory = Callable[[], requests.Session]

logger = logging.getLogger(__name__)


class HttpFetcher:
    """Thin ``requests`` wrapper that returns response bodies or raises ``NetworkError``.

    ``requests`` is blocking, so the async variant hands the call to a worker
    thread and leaves the event loop free for other fetches.
    """

    def __init__(
        self,
        session_factory: SessionFactory | None = None,
        *,
        timeout: float | None = None,
        user_agent: str | None = None,
    ) -> None:
        self._session_factory = session_factory or requests.Session
        self._timeout = SETTINGS.timeout if timeout is None else timeout
        self._user_agent = user_agent or SETTINGS.user_agent
        self._session = self._create_session()

    def _create_session(self) -> requests.Session:
        session = self._session_factory()
        session.headers.update({"User-Agent": self._user_agent})
        return session

    def get_bytes(self, url: str) -> bytes:
        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            logger.warning("GET %s failed with status %s", url, status)
            raise NetworkError(str(exc), url=url, status=status) from exc
        except requests.RequestException as exc:
            logger.warning("GET %s failed: %s", url, exc)
            raise NetworkError(str(exc), url=url) from exc
        return response.content

    async def fetch(self, url: str) -> bytes:
        return await asyncio.to_thread(self.get_bytes, url)

    def close(self) -> None:
        self._session.close()
