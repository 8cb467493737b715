"""Business logic for validating and storing uploaded receipt files."""

from __future__ import annotations

import logging

from receipt_store.errors import (
    CANT_WRITE_FILE,
    INVALID_FILE_TYPE,
    MISSING_OR_INVALID_USERID,
    ReceiptError,
)
from receipt_store.helpers.sniff_helpers import is_jpeg_content
from receipt_store.helpers.storage_helpers import (
    IdFactory,
    new_file_id,
    receipt_file_name,
    receipt_path,
    write_receipt_atomically,
)
from receipt_store.services.request_validation import check_upload_size, require_user_id

logger = logging.getLogger(__name__)


def process_receipt_upload(
    user_id: str,
    content: bytes,
    root: str,
    max_size: int,
    id_factory: IdFactory = new_file_id,
) -> dict:
    """
    Validates an uploaded payload and persists it below the user's directory.

    Args:
        user_id: Opaque user identifier, used as a single path segment.
        content: Raw file contents as received.
        root: Storage root directory.
        max_size: Upper bound for the payload in bytes.
        id_factory: Produces the new file id; swapped for fixed ids in tests.

    Returns:
        dict: the generated ``file_id``, the written ``path`` and ``size_bytes``.

    Raises:
        ReceiptError: FILE_TOO_BIG, INVALID_FILE_TYPE, MISSING_OR_INVALID_USERID
            or CANT_WRITE_FILE.
    """
    require_user_id(user_id)
    check_upload_size(len(content), max_size)

    # the declared MIME type is never trusted, only the bytes
    if not is_jpeg_content(content):
        raise ReceiptError(INVALID_FILE_TYPE, 400)

    file_id = id_factory()
    try:
        path = receipt_path(root, user_id, receipt_file_name(file_id))
    except ValueError as exc:
        raise ReceiptError(MISSING_OR_INVALID_USERID, 400) from exc

    try:
        write_receipt_atomically(path, content)
    except OSError as exc:
        logger.error("Could not write receipt to %s: %s", path, exc)
        raise ReceiptError(CANT_WRITE_FILE, 500) from exc

    logger.info("UPLOADING: %s", path)
    return {"file_id": file_id, "path": path, "size_bytes": len(content)}


__all__ = ["process_receipt_upload"]
