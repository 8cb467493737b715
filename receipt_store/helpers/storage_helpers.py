"""Storage layout: receipts live at ``<root>/<userID>/<fileID>.jpg``."""

from __future__ import annotations

import os
import tempfile
import uuid
from typing import Callable

RECEIPT_EXTENSION = ".jpg"
USER_DIR_MODE = 0o700

IdFactory = Callable[[], str]


def new_file_id() -> str:
    """Opaque unique token for a freshly stored receipt (random UUID4)."""
    return str(uuid.uuid4())


def is_safe_segment(value: str | None) -> bool:
    """A value usable as exactly one path component below the storage root."""
    if not value or value in (".", ".."):
        return False
    if "\x00" in value:
        return False
    separators = {"/", "\\", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    return not any(sep in value for sep in separators)


def _inside_root(root: str, path: str) -> bool:
    real_root = os.path.realpath(root)
    return os.path.commonpath([real_root, os.path.realpath(path)]) == real_root


def user_dir(root: str, user_id: str) -> str:
    if not is_safe_segment(user_id):
        raise ValueError(f"invalid user id: {user_id!r}")
    return os.path.join(root, user_id)


def receipt_path(root: str, user_id: str, file_name: str) -> str:
    """
    Joins root, user id and file name into the on-disk location.

    Raises ValueError when either segment could escape the storage root.
    """
    if not is_safe_segment(file_name):
        raise ValueError(f"invalid file name: {file_name!r}")
    path = os.path.join(user_dir(root, user_id), file_name)
    if not _inside_root(root, path):
        raise ValueError(f"path escapes storage root: {path!r}")
    return path


def receipt_file_name(file_id: str) -> str:
    return file_id + RECEIPT_EXTENSION


def write_receipt_atomically(path: str, content: bytes) -> None:
    """
    Writes ``content`` to a temporary sibling of ``path`` and renames it into place.

    Readers either see no file or the complete one. The temporary file is
    removed again if anything goes wrong.
    """
    directory = os.path.dirname(path)
    os.makedirs(directory, mode=USER_DIR_MODE, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".upload-", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def read_receipt(path: str) -> bytes:
    with open(path, "rb") as fh:
        return fh.read()


__all__ = [
    "IdFactory",
    "RECEIPT_EXTENSION",
    "new_file_id",
    "is_safe_segment",
    "user_dir",
    "receipt_path",
    "receipt_file_name",
    "write_receipt_atomically",
    "read_receipt",
]
