"""Image decoding shared by the analysis passes."""

from __future__ import annotations

import io
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from picrank.errors import DecodeError

# Failures Pillow raises for unreadable or oversized image data
DECODE_ERRORS = (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError)


def decode_image(data: Image.Image | bytes | Path | str) -> Image.Image:
    """Turn image data into an oriented RGB PIL image.

    The EXIF orientation is applied before any measurement, since the
    aspect-ratio heuristics depend on it.

    Args:
        data: PIL Image, encoded image bytes, or path to an image file.

    Returns:
        Fully loaded RGB image.

    Raises:
        DecodeError: If the data cannot be decoded, including images over
            Pillow's decompression-bomb pixel limit.
    """
    try:
        if isinstance(data, Image.Image):
            img = data
        elif isinstance(data, (bytes, bytearray)):
            img = Image.open(io.BytesIO(data))
        elif isinstance(data, (str, Path)):
            img = Image.open(data)
        else:
            raise DecodeError(f"unsupported image type: {type(data).__name__}")

        img.load()
        img = ImageOps.exif_transpose(img)
        if img.mode != "RGB":
            img = img.convert("RGB")
    except DecodeError:
        raise
    except DECODE_ERRORS as e:
        raise DecodeError(f"cannot decode image: {e}") from e

    if img.width == 0 or img.height == 0:
        raise DecodeError("image has no pixels")
    return img
