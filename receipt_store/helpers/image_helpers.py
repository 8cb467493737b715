"""Helper utilities for decoding, resampling and re-encoding stored receipts."""

from __future__ import annotations

from io import BytesIO
from typing import Tuple

from PIL import Image

from receipt_store.config import JPEG_QUALITY


def read_jpeg_size(data: bytes) -> Tuple[int, int]:
    """
    Reads only the JPEG header and returns ``(width, height)``.

    Raises ValueError if the bytes are not a JPEG image.
    """
    with Image.open(BytesIO(data)) as img:
        if img.format != "JPEG":
            raise ValueError(f"expected JPEG, got {img.format or 'unknown'}")
        return img.size


def scaled_size(width: int, height: int, scale: float) -> Tuple[int, int]:
    """Target width is round(width * scale); height follows the aspect ratio."""
    new_width = max(1, round(width * scale))
    new_height = max(1, round(height * new_width / width))
    return new_width, new_height


def resize_jpeg(data: bytes, scale: float, quality: int = JPEG_QUALITY) -> bytes:
    """
    Decodes a JPEG, resamples it with nearest-neighbour interpolation and
    encodes the result as JPEG at the given quality.

    The output only depends on the input bytes and ``scale``.
    """
    width, height = read_jpeg_size(data)
    target = scaled_size(width, height, scale)
    with Image.open(BytesIO(data)) as img:
        img.load()
        resized = img.resize(target, Image.Resampling.NEAREST)
    if resized.mode not in ("RGB", "L", "CMYK"):
        resized = resized.convert("RGB")
    buffer = BytesIO()
    resized.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


__all__ = ["read_jpeg_size", "scaled_size", "resize_jpeg"]
