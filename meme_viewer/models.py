from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Generic, Optional, Tuple, TypeVar

from .errors import FetchError

T = TypeVar("T")

CacheKey = Tuple[str, str]


@dataclass(frozen=True)
class Meme:
    id: str
    title: str
    url: str
    rating: int

    @property
    def cache_key(self) -> CacheKey:
        # A rating change must not orphan a cached image, a new url must.
        return (self.id, self.url)

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title, "url": self.url, "rating": self.rating}


MemeDirectory = Tuple[Meme, ...]


class DirectoryState(str, enum.Enum):
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Terminal outcome of a fetch: either ``value`` or ``error`` is set."""

    value: Optional[T] = None
    error: Optional[FetchError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: FetchError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
