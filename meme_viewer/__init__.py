"""Meme viewer package exports."""

from .config import APP_VERSION
from .errors import DecodeError, DecodeErrorKind, FetchError, ImageDecodeError, NetworkError
from .models import DirectoryState, Meme, Result
from .service import MemeService
from . import infrastructure

__version__ = APP_VERSION

__all__ = [
    "APP_VERSION",
    "__version__",
    "DecodeError",
    "DecodeErrorKind",
    "DirectoryState",
    "FetchError",
    "ImageDecodeError",
    "Meme",
    "MemeService",
    "NetworkError",
    "Result",
    "infrastructure",
]
