"""Logging setup.

Levels:
- INFO: business events (album created/deleted, photo uploaded, sign-in)
- WARNING: swallowed storage failures, skipped profile albums
- ERROR: profile lookup failures, screen load failures
"""
import logging
import sys
from typing import Optional

from .config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Send log records to stdout at ``level`` (default: GLIMPSE_LOG_LEVEL)."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
