"""Filesystem probe for directory exclusion markers."""

from __future__ import annotations

import os

NO_MEDIA_MARKER = ".nomedia"
VCS_IGNORE_MARKER = ".gitignore"
DEFAULT_MARKERS = (NO_MEDIA_MARKER, VCS_IGNORE_MARKER)


class FsMarkerProbe:
    """Reports whether a directory contains any of the marker files."""

    def __init__(self, markers: tuple[str, ...] = DEFAULT_MARKERS) -> None:
        self._markers = markers

    def __call__(self, directory: str) -> bool:
        # os.path.exists swallows errors, a permission problem must surface
        for marker in self._markers:
            try:
                os.stat(os.path.join(directory, marker))
                return True
            except FileNotFoundError:
                continue
        return False
