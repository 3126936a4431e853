"""Logging initialization utilities using loguru."""

from __future__ import annotations

import os
from pathlib import Path
import re
import sys

from loguru import logger

CONSOLE_FORMAT = "<level>{level: <7}</level> {message}"
LOG_FILE_PATTERN = re.compile(r"app_.*\.log")


def get_log_directory() -> str:
    """Get the main log directory path."""
    return str(Path.home() / ".photo_diary" / "logs")


def init_logging(log_dir: str | None = None, level: str = "INFO", verbose: bool = False) -> None:
    """Initialize console logging and rotating file logging under `log_dir`."""
    if log_dir is None:
        log_dir = get_log_directory()
    log_path = Path(log_dir)

    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else level,
        format=CONSOLE_FORMAT,
        backtrace=False,
        diagnose=False,
    )
    try:
        log_path.mkdir(parents=True, exist_ok=True)
    except OSError as ex:
        logger.warning("Log directory unavailable ({}): {}", log_path, ex)
        return
    logger.add(
        str(log_path / "app_{time:YYYYMMDD}.log"),
        rotation="10 MB",
        retention="10 days",
        compression="zip",
        enqueue=True,
        backtrace=False,
        diagnose=False,
        level="DEBUG",
    )


def find_latest_log_file(log_dir: str | None = None) -> Path | None:
    """Return the most recently written ``app_*.log`` in `log_dir`.

    Rotated archives (``.log.zip``) are ignored. A missing or unreadable
    directory yields None.
    """
    folder = Path(log_dir or get_log_directory())
    try:
        with os.scandir(folder) as it:
            names = [e.name for e in it if e.is_file() and LOG_FILE_PATTERN.fullmatch(e.name)]
    except OSError:
        return None

    latest: Path | None = None
    latest_mtime = float("-inf")
    for name in names:
        path = folder / name
        try:
            mtime = path.stat().st_mtime
        except OSError:
            # rotated away since the scan
            continue
        if mtime > latest_mtime:
            latest, latest_mtime = path, mtime
    return latest
