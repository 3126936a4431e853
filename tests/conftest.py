from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from photo_diary.core.models import DayBucket, MediaItem
from photo_diary.core.services.date_extractor import REFERENCE_TZ


def make_item(
    when: datetime, size: int = 1000, folder: str = "/photos", prefix: str = "IMG"
) -> MediaItem:
    """Build a MediaItem whose name encodes `when` (taken as UTC+8)."""
    when = when.replace(tzinfo=REFERENCE_TZ)
    name = f"{prefix}_{when:%Y%m%d_%H%M%S}.jpg"
    return MediaItem(
        path=f"{folder}/{name}",
        name=name,
        size=size,
        captured_at=when,
        day_key=when.strftime("%Y-%m-%d"),
    )


def make_bucket(items: list[MediaItem]) -> DayBucket:
    ordered = sorted(items, key=lambda it: (it.timestamp_ms, it.path))
    return DayBucket(day_key=ordered[0].day_key, items=tuple(ordered))


def spread_day(count: int, start: datetime, step: timedelta, **kwargs) -> list[MediaItem]:
    return [make_item(start + i * step, **kwargs) for i in range(count)]


@pytest.fixture
def day_start() -> datetime:
    return datetime(2023, 5, 20, 6, 0, 0)
