"""Recursive discovery of candidate image files."""

from __future__ import annotations

from collections.abc import Iterator
import os
from pathlib import Path
import re

from loguru import logger

from photo_diary.core.models import CandidateEntry

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".avif", ".heic", ".heif", ".webp", ".tiff"}
DEFAULT_MIN_FILE_SIZE = 100 * 1024

# Screenshots, thumbnails, app caches and other non-photo noise.
JUNK_NAME_PATTERN = re.compile(
    r"(screenshot|screen_shot|screencap|截屏|截图|thumb|thumbnail|cache|sticker|emoji|\.trashed)",
    re.IGNORECASE,
)


def is_image(path: str) -> bool:
    """Check if a file path is a supported image based on extension."""
    return Path(path).suffix.lower() in IMAGE_EXTENSIONS


def is_junk(name: str) -> bool:
    return bool(JUNK_NAME_PATTERN.search(name))


def walk_images(root: str, min_file_size: int = DEFAULT_MIN_FILE_SIZE) -> Iterator[CandidateEntry]:
    """Yield image files under `root` in sorted path order.

    Files smaller than `min_file_size` bytes or with junk-looking names are
    skipped. Entries that cannot be stat'ed are logged and skipped.
    """
    scanned = 0
    kept = 0
    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        dirnames.sort()
        for name in sorted(filenames):
            scanned += 1
            if not is_image(name) or is_junk(name):
                continue
            path = os.path.join(dirpath, name)
            try:
                st = os.stat(path)
            except OSError as ex:
                logger.warning("stat failed for {}: {}", path, ex)
                continue
            if st.st_size < min_file_size:
                continue
            kept += 1
            yield CandidateEntry(path=path, name=name, size=int(st.st_size), mtime=st.st_mtime)
    logger.info("Walk {}: {} files scanned, {} candidates", root, scanned, kept)


def _log_walk_error(ex: OSError) -> None:
    logger.warning("Walk error: {}", ex)
