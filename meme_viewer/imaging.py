from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError

from .errors import ImageDecodeError

DISPLAY_MODES = ("RGB", "RGBA")


def decode_image(data: bytes, *, url: str | None = None) -> Image.Image:
    """Decode raw bytes into a fully loaded Pillow image in RGB or RGBA mode."""

    if not data:
        raise ImageDecodeError("empty response body", url=url)
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        ValueError,
        EOFError,
        SyntaxError,
    ) as exc:
        raise ImageDecodeError(f"cannot decode image: {exc}", url=url) from exc
    if image.mode not in DISPLAY_MODES:
        image = image.convert("RGBA")
    return image
