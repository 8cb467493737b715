"""Validation of the raw request values shared by the upload and download pipelines."""

from __future__ import annotations

import math
import re
from typing import Mapping, Sequence

from receipt_store.config import LARGEST_UP_SCALE, SMALLEST_DOWN_SCALE
from receipt_store.errors import (
    FILE_TOO_BIG,
    MISSING_OR_INVALID_FILENAME,
    MISSING_OR_INVALID_SCALE,
    MISSING_OR_INVALID_USERID,
    ReceiptError,
)
from receipt_store.helpers.storage_helpers import is_safe_segment

# Plain decimal literal: no whitespace, underscores, "inf" or "nan".
_FLOAT_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def _first_value(query: Mapping[str, Sequence[str]], name: str) -> str | None:
    values = query.get(name)
    if not values:
        return None
    return values[0]


def parse_scale(query: Mapping[str, Sequence[str]]) -> float:
    """Scale factor from ``?scale=``, within [0.1, 2.0] inclusive."""
    raw = _first_value(query, "scale")
    if raw is None or not _FLOAT_RE.match(raw):
        raise ReceiptError(MISSING_OR_INVALID_SCALE, 400)
    value = float(raw)
    if not math.isfinite(value) or not (SMALLEST_DOWN_SCALE <= value <= LARGEST_UP_SCALE):
        raise ReceiptError(MISSING_OR_INVALID_SCALE, 400)
    return value


# TODO: read the user id from the request context once an authentication
# middleware (e.g. JWT) populates it, instead of trusting the query/form value.
def require_user_id(user_id: str | None) -> str:
    if not is_safe_segment(user_id):
        raise ReceiptError(MISSING_OR_INVALID_USERID, 400)
    return user_id


def parse_user_id(query: Mapping[str, Sequence[str]]) -> str:
    return require_user_id(_first_value(query, "userid"))


def parse_file_name(query: Mapping[str, Sequence[str]]) -> str:
    file_name = _first_value(query, "filename")
    if not is_safe_segment(file_name):
        raise ReceiptError(MISSING_OR_INVALID_FILENAME, 400)
    return file_name


def check_upload_size(size: int | None, max_size: int) -> None:
    """Rejects a declared or actual payload size above ``max_size``."""
    if size is not None and size > max_size:
        raise ReceiptError(FILE_TOO_BIG, 400)


__all__ = [
    "parse_scale",
    "parse_user_id",
    "parse_file_name",
    "require_user_id",
    "check_upload_size",
]
