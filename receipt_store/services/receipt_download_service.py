"""Business logic for locating a stored receipt and returning it resized."""

from __future__ import annotations

import logging
import os

from PIL import Image

from receipt_store.errors import CANT_READ_FILE, FILE_NOT_FOUND_FOR_USER, ReceiptError
from receipt_store.helpers.image_helpers import resize_jpeg
from receipt_store.helpers.storage_helpers import read_receipt, receipt_path

logger = logging.getLogger(__name__)


def load_resized_receipt(root: str, user_id: str, file_name: str, scale: float) -> bytes:
    """
    Returns the stored receipt re-encoded as JPEG at ``scale`` times its width.

    An unknown user and an unknown file both end in FILE_NOT_FOUND_FOR_USER,
    so callers cannot tell which of the two was wrong.
    """
    try:
        path = receipt_path(root, user_id, file_name)
    except ValueError as exc:
        raise ReceiptError(FILE_NOT_FOUND_FOR_USER, 404) from exc
    if not os.path.isfile(path):
        raise ReceiptError(FILE_NOT_FOUND_FOR_USER, 404)

    logger.info("DOWNLOADING: %s", path)
    try:
        data = read_receipt(path)
    except OSError as exc:
        raise ReceiptError(CANT_READ_FILE, 500) from exc

    try:
        return resize_jpeg(data, scale)
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        logger.error("Could not decode receipt %s: %s", path, exc)
        raise ReceiptError(CANT_READ_FILE, 500) from exc


__all__ = ["load_resized_receipt"]
