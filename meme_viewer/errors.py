"""Typed failures surfaced by the directory fetcher and the image loader."""

from __future__ import annotations

import enum


class DecodeErrorKind(str, enum.Enum):
    MISSING_KEY = "missing_key"
    TYPE_MISMATCH = "type_mismatch"
    MISSING_VALUE = "missing_value"
    CORRUPTED = "corrupted"
    OTHER = "other"


class FetchError(Exception):
    """Base class for every failure returned inside a ``Result``."""

    kind: str = "fetch_error"


class NetworkError(FetchError):
    """Transport failure, timeout, or a non-2xx status."""

    kind = "network"

    def __init__(self, message: str, *, url: str | None = None, status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class DecodeError(FetchError):
    """The directory body does not have the expected JSON shape.

    ``path`` points at the offending location using dotted keys and list
    indices, e.g. ``data.memes[3].rating``. An empty path means the document
    root.
    """

    def __init__(self, kind: DecodeErrorKind, message: str, *, path: str = "") -> None:
        super().__init__(message)
        self.decode_kind = kind
        self.path = path

    @property
    def kind(self) -> str:  # type: ignore[override]
        return self.decode_kind.value

    def __str__(self) -> str:
        where = self.path or "<root>"
        return f"{self.decode_kind.value} at {where}: {self.args[0]}"


class ImageDecodeError(FetchError):
    """Bytes returned for a meme do not decode as a supported image."""

    kind = "image_decode"

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url
