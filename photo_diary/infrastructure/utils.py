"""Utilities for EXIF date extraction and size formatting.

EXIF is only consulted when a file name carries no capture stamp and the EXIF
fallback is switched on. Reads are best effort and never raise; callers should
expect `None` when data is not available.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from loguru import logger
from PIL import Image

try:  # pragma: no cover - optional dependency
    from pillow_heif import register_heif_opener  # type: ignore

    register_heif_opener()
    PIL_HEIF_AVAILABLE = True
except ImportError:  # pragma: no cover - optional dependency
    PIL_HEIF_AVAILABLE = False

EXIF_DATETIME_ORIGINAL = 36867
EXIF_DATETIME = 306
EXIF_IFD_POINTER = 0x8769


def get_exif_datetime_original(path: str) -> datetime | None:
    """Extract EXIF DateTimeOriginal (or DateTime) via Pillow.

    Returns a naive datetime in camera local time, or None.
    """
    try:
        with Image.open(path) as im:
            data: Any = im.getexif()
            if not data:
                return None
            # DateTimeOriginal lives in the Exif sub-IFD on most cameras
            val = data.get_ifd(EXIF_IFD_POINTER).get(EXIF_DATETIME_ORIGINAL)
            val = val or data.get(EXIF_DATETIME_ORIGINAL) or data.get(EXIF_DATETIME)
            if not val:
                return None
            val_str = str(val).strip().rstrip("\x00")
            # Common EXIF format: "YYYY:MM:DD HH:MM:SS"
            if len(val_str) >= 19 and val_str[4] == ":" and val_str[7] == ":":
                return datetime.strptime(val_str[:19], "%Y:%m:%d %H:%M:%S")
            return datetime.fromisoformat(val_str.replace("/", "-"))
    except (OSError, ValueError, TypeError) as ex:
        logger.debug("EXIF read failed for {}: {}", path, ex)
        return None


def format_size(num_bytes: int) -> str:
    """Format a byte count as a short human readable string."""
    size = max(0, int(num_bytes or 0))
    if size < 1024:
        return f"{size} B"
    value = size / 1024
    for unit in ("KB", "MB"):
        if value < 1024:
            return f"{value:.2f} {unit}"
        value /= 1024
    return f"{value:.2f} GB"
