# -*- coding: utf-8 -*-
"""
Configuration of the receipt store.

Values come from environment variables, optionally loaded from a local
.env file. Handlers read ``settings`` at request time, so tests can point
the service at a temporary storage root by patching the attributes.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

# Per-file limit and the hard cap on the whole request body (512 KiB / 1 MiB).
DEFAULT_MAX_UPLOAD_SIZE = 512 * 1024
DEFAULT_MAX_BODY_SIZE = 2 * DEFAULT_MAX_UPLOAD_SIZE

SMALLEST_DOWN_SCALE = 0.1
LARGEST_UP_SCALE = 2.0
JPEG_QUALITY = 95


class Settings:
    UPLOAD_PATH: str = os.getenv("RECEIPTS_UPLOAD_PATH", "./receipts")
    MAX_UPLOAD_SIZE: int = int(os.getenv("RECEIPTS_MAX_UPLOAD_SIZE", str(DEFAULT_MAX_UPLOAD_SIZE)))
    MAX_BODY_SIZE: int = int(os.getenv("RECEIPTS_MAX_BODY_SIZE", str(DEFAULT_MAX_BODY_SIZE)))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8080"))


settings = Settings()


def configure_logging() -> None:
    """Sets up the root logger once for the whole process."""
    level = getattr(logging, settings.LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - [%(levelname)s] - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("multipart").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)
