"""Infrastructure helpers for networking, caching and responses."""

from .cache import ImageCache
from .network import HttpFetcher
from .responses import encode_png, send_png

__all__ = [
    "ImageCache",
    "HttpFetcher",
    "encode_png",
    "send_png",
]
