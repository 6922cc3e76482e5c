"""Meme directory fetcher: one GET to the meme API, decoded into ``Meme`` records.

The API answers with an envelope of the form::

    {"success": true, "data": {"memes": [{"id": "...", "name": "...", "url": "...", "rating": 5}]}}

Only ``id``, ``name``, ``url`` and ``rating`` are read from each entry; any
other keys are ignored. Wire ``name`` becomes ``Meme.title``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping
from urllib.parse import urlsplit

from .config import SETTINGS
from .errors import DecodeError, DecodeErrorKind, FetchError
from .infrastructure.network import HttpFetcher
from .models import Meme, MemeDirectory, Result

logger = logging.getLogger(__name__)


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _type_name(value: Any) -> str:
    return "null" if value is None else type(value).__name__


def _require(obj: Mapping[str, Any], key: str, path: str) -> Any:
    field_path = _join(path, key)
    if key not in obj:
        raise DecodeError(DecodeErrorKind.MISSING_KEY, f"key {key!r} not found", path=field_path)
    value = obj[key]
    if value is None:
        raise DecodeError(DecodeErrorKind.MISSING_VALUE, f"expected a value for {key!r}, got null", path=field_path)
    return value


def _expect_object(value: Any, path: str) -> Mapping[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(
            DecodeErrorKind.TYPE_MISMATCH,
            f"expected an object, got {_type_name(value)}",
            path=path,
        )
    return value


def _expect_str(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise DecodeError(
            DecodeErrorKind.TYPE_MISMATCH,
            f"expected a string, got {_type_name(value)}",
            path=path,
        )
    return value


def _expect_int(value: Any, path: str) -> int:
    # bool is an int subclass but never a valid rating
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(
            DecodeErrorKind.TYPE_MISMATCH,
            f"expected an integer, got {_type_name(value)}",
            path=path,
        )
    return value


def _expect_url(value: Any, path: str) -> str:
    text = _expect_str(value, path)
    parts = urlsplit(text)
    if not parts.scheme or not parts.netloc:
        raise DecodeError(DecodeErrorKind.CORRUPTED, f"invalid absolute URL {text!r}", path=path)
    return text


def decode_meme(entry: Any, path: str) -> Meme:
    obj = _expect_object(entry, path)
    return Meme(
        id=_expect_str(_require(obj, "id", path), _join(path, "id")),
        title=_expect_str(_require(obj, "name", path), _join(path, "name")),
        url=_expect_url(_require(obj, "url", path), _join(path, "url")),
        rating=_expect_int(_require(obj, "rating", path), _join(path, "rating")),
    )


def decode_directory(body: bytes | str) -> MemeDirectory:
    """Decode an API envelope into a directory, raising ``DecodeError`` on any mismatch."""

    try:
        document = json.loads(body)
    except (UnicodeDecodeError, ValueError) as exc:
        raise DecodeError(DecodeErrorKind.CORRUPTED, f"body is not valid JSON ({exc})") from exc
    except RecursionError as exc:
        raise DecodeError(DecodeErrorKind.OTHER, "body is nested too deeply to decode") from exc

    root = _expect_object(document, "")
    success = _require(root, "success", "")
    if not isinstance(success, bool):
        raise DecodeError(
            DecodeErrorKind.TYPE_MISMATCH,
            f"expected a boolean, got {_type_name(success)}",
            path="success",
        )
    if not success:
        reason = root.get("error_message") or "no reason given"
        raise DecodeError(DecodeErrorKind.OTHER, f"API reported failure: {reason}", path="success")

    data = _expect_object(_require(root, "data", ""), "data")
    memes = _require(data, "memes", "data")
    if not isinstance(memes, list):
        raise DecodeError(
            DecodeErrorKind.TYPE_MISMATCH,
            f"expected an array, got {_type_name(memes)}",
            path="data.memes",
        )
    return tuple(decode_meme(entry, f"data.memes[{index}]") for index, entry in enumerate(memes))


class MemeDirectoryFetcher:
    def __init__(self, fetcher: HttpFetcher, *, api_url: str | None = None) -> None:
        self._fetcher = fetcher
        self._api_url = api_url or SETTINGS.api_url

    @property
    def api_url(self) -> str:
        return self._api_url

    async def fetch_meme_directory(self) -> Result[MemeDirectory]:
        try:
            body = await self._fetcher.fetch(self._api_url)
            memes = decode_directory(body)
        except DecodeError as exc:
            logger.warning("Failed to decode meme directory: %s", exc)
            return Result.failure(exc)
        except FetchError as exc:
            logger.warning("Failed to fetch meme directory from %s: %s", self._api_url, exc)
            return Result.failure(exc)
        logger.info("Loaded %d memes from %s", len(memes), self._api_url)
        return Result.success(memes)
