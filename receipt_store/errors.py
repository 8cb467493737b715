"""Error codes and the single reporter every pipeline failure goes through."""

from __future__ import annotations

import logging

from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)

MISSING_OR_INVALID_SCALE = "MISSING_OR_INVALID_SCALE"
MISSING_OR_INVALID_USERID = "MISSING_OR_INVALID_USERID"
MISSING_OR_INVALID_FILENAME = "MISSING_OR_INVALID_FILENAME"
FILE_NOT_FOUND_FOR_USER = "FILE_NOT_FOUND_FOR_USER"
CANT_PARSE_FORM = "CANT_PARSE_FORM"
CANT_READ_FILE = "CANT_READ_FILE"
CANT_WRITE_FILE = "CANT_WRITE_FILE"
CANT_READ_FILE_TYPE = "CANT_READ_FILE_TYPE"
INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
INVALID_FILE = "INVALID_FILE"
FILE_TOO_BIG = "FILE_TOO_BIG"


class ReceiptError(Exception):
    """A terminal pipeline failure: one error code plus the HTTP status to answer with."""

    def __init__(self, code: str, status_code: int = 400) -> None:
        super().__init__(code)
        self.code = code
        self.status_code = status_code


def generate_error(code: str, status_code: int) -> PlainTextResponse:
    """
    Logs the error code and builds the plain-text response carrying it.

    The body is the bare code (e.g. ``FILE_TOO_BIG``); nothing else crosses
    the boundary.
    """
    if status_code >= 500:
        logger.error("ERROR: %s", code)
    else:
        logger.warning("ERROR: %s", code)
    return PlainTextResponse(code, status_code=status_code)


__all__ = [
    "ReceiptError",
    "generate_error",
    "MISSING_OR_INVALID_SCALE",
    "MISSING_OR_INVALID_USERID",
    "MISSING_OR_INVALID_FILENAME",
    "FILE_NOT_FOUND_FOR_USER",
    "CANT_PARSE_FORM",
    "CANT_READ_FILE",
    "CANT_WRITE_FILE",
    "CANT_READ_FILE_TYPE",
    "INVALID_FILE_TYPE",
    "INVALID_FILE",
    "FILE_TOO_BIG",
]
