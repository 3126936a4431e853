"""Capture-time extraction from file names.

File names such as ``IMG_20210101_120000.heic`` or ``mmexport-20220314-083015``
carry the capture time. This module finds that stamp, validates it against the
real calendar and pins it to a fixed UTC+8 offset so day boundaries do not
depend on the host locale. It never raises; callers get ``None`` for names
without a usable stamp.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import PurePath
import re

from photo_diary.core.models import CandidateEntry, MediaItem

REFERENCE_TZ = timezone(timedelta(hours=8))
MIN_YEAR = 2000
MAX_YEAR = 2050

DATE_TIME_PATTERN = re.compile(r"(?<!\d)(\d{8})[-_ T]?(\d{6})")


@dataclass(frozen=True)
class DateMatch:
    """A validated capture time and the calendar day it falls on."""

    captured_at: datetime
    day_key: str


def _validate(year: int, month: int, day: int, hour: int, minute: int, second: int) -> bool:
    if not MIN_YEAR <= year <= MAX_YEAR:
        return False
    if not 1 <= month <= 12:
        return False
    if not 1 <= day <= calendar.monthrange(year, month)[1]:
        return False
    return hour <= 23 and minute <= 59 and second <= 59


def extract(name: str) -> DateMatch | None:
    """Return the capture time encoded in `name`, or None if absent/invalid.

    A stamp must not be preceded by another digit. When the stem holds several
    stamps the first one that passes validation wins.
    """
    stem = PurePath(name or "").stem
    for m in DATE_TIME_PATTERN.finditer(stem):
        ds, ts = m.group(1), m.group(2)
        parts = (int(ds[0:4]), int(ds[4:6]), int(ds[6:8]), int(ts[0:2]), int(ts[2:4]), int(ts[4:6]))
        if _validate(*parts):
            dt = datetime(*parts, tzinfo=REFERENCE_TZ)
            return DateMatch(captured_at=dt, day_key=dt.strftime("%Y-%m-%d"))
    return None


def from_datetime(dt: datetime | None) -> DateMatch | None:
    """Validate an externally obtained datetime (e.g. EXIF).

    Naive values are taken to be in the reference offset; aware values are
    converted to it.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=REFERENCE_TZ)
    else:
        dt = dt.astimezone(REFERENCE_TZ)
    dt = dt.replace(microsecond=0)
    if not _validate(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second):
        return None
    return DateMatch(captured_at=dt, day_key=dt.strftime("%Y-%m-%d"))


def to_media_item(entry: CandidateEntry, match: DateMatch | None = None) -> MediaItem | None:
    """Build a MediaItem for `entry`, parsing its name unless `match` is given."""
    if match is None:
        match = extract(entry.name)
    if match is None:
        return None
    return MediaItem(
        path=entry.path,
        name=entry.name,
        size=max(0, int(entry.size or 0)),
        captured_at=match.captured_at,
        day_key=match.day_key,
    )
