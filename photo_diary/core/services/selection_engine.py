"""Bounded per-day selection.

For each day the engine spreads `target_count` ideal slots evenly over the
time-ordered items and fills every slot from a small window around it. A
window candidate is eligible only while its hour, the day's pet quota and the
spacing floor allow it; the largest eligible file wins. A slot whose window
has no eligible candidate stays empty. There is no retry and no borrowing from
neighbouring slots, so identical input always yields identical output.
"""

from __future__ import annotations

import bisect
from collections import Counter, defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
import re

from loguru import logger

from photo_diary.core.models import DayBucket, MediaItem, SelectionPlan, SelectionResult
from photo_diary.core.rules.quota_tables import (
    MAX_PER_HOUR,
    MAX_PET_PER_DAY,
    MIN_KEEP_ALL,
    PET_PATTERN,
)


def group_by_day(items: Iterable[MediaItem]) -> list[DayBucket]:
    """Group items into day buckets ordered by day, each ordered by time."""
    grouped: dict[str, list[MediaItem]] = defaultdict(list)
    for item in items:
        grouped[item.day_key].append(item)
    buckets: list[DayBucket] = []
    for day_key in sorted(grouped):
        ordered = sorted(grouped[day_key], key=lambda it: (it.timestamp_ms, it.path))
        buckets.append(DayBucket(day_key=day_key, items=tuple(ordered)))
    return buckets


@dataclass
class _DayContext:
    """Mutable counters owned by a single `select` call."""

    min_interval_ms: int
    taken: set[int] = field(default_factory=set)
    hour_counts: Counter = field(default_factory=Counter)
    pet_count: int = 0
    picked_times: list[int] = field(default_factory=list)

    def far_enough(self, ts: int) -> bool:
        """True if `ts` keeps the spacing floor to every picked item."""
        pos = bisect.bisect_left(self.picked_times, ts)
        if pos < len(self.picked_times) and self.picked_times[pos] - ts < self.min_interval_ms:
            return False
        if pos > 0 and ts - self.picked_times[pos - 1] < self.min_interval_ms:
            return False
        return True


class SelectionEngine:
    """Windowed, constrained selection over one day's items."""

    def __init__(
        self,
        max_per_hour: int = MAX_PER_HOUR,
        max_pet_per_day: int = MAX_PET_PER_DAY,
        min_keep_all: int = MIN_KEEP_ALL,
        pet_pattern: re.Pattern[str] = PET_PATTERN,
    ) -> None:
        self._max_per_hour = max_per_hour
        self._max_pet = max_pet_per_day
        self._min_keep_all = min_keep_all
        self._pet_rx = pet_pattern

    def is_pet(self, item: MediaItem) -> bool:
        return bool(self._pet_rx.search(item.path))

    def select(self, bucket: DayBucket, plan: SelectionPlan) -> SelectionResult:
        """Pick up to `plan.target_count` items from `bucket`.

        `bucket.items` must be ordered by capture time.
        """
        items = bucket.items
        n = len(items)
        target = min(plan.target_count, n)
        if target <= 0:
            return SelectionResult(day_key=bucket.day_key)
        if n < self._min_keep_all:
            return SelectionResult(day_key=bucket.day_key, items=list(items))

        ctx = _DayContext(min_interval_ms=plan.min_interval_ms)
        radius = max(1, n // (2 * target))
        picked: list[MediaItem] = []

        for slot in range(target):
            ideal = ((2 * slot + 1) * n) // (2 * target)
            best = self._best_in_window(items, ideal, radius, ctx)
            if best is None:
                logger.debug("{} slot {} at index {} skipped", bucket.day_key, slot, ideal)
                continue
            item = items[best]
            ctx.taken.add(best)
            ctx.hour_counts[item.hour_key] += 1
            if self.is_pet(item):
                ctx.pet_count += 1
            bisect.insort(ctx.picked_times, item.timestamp_ms)
            picked.append(item)

        picked.sort(key=lambda it: (it.timestamp_ms, it.path))
        return SelectionResult(day_key=bucket.day_key, items=picked)

    def _best_in_window(
        self, items: tuple[MediaItem, ...], center: int, radius: int, ctx: _DayContext
    ) -> int | None:
        lo = max(0, center - radius)
        hi = min(len(items) - 1, center + radius)
        best: int | None = None
        best_size = -1
        for idx in range(lo, hi + 1):
            if idx in ctx.taken:
                continue
            cand = items[idx]
            if not self._eligible(cand, ctx):
                continue
            if cand.size > best_size:
                best, best_size = idx, cand.size
        return best

    def _eligible(self, item: MediaItem, ctx: _DayContext) -> bool:
        if ctx.hour_counts[item.hour_key] >= self._max_per_hour:
            return False
        if ctx.pet_count >= self._max_pet and self.is_pet(item):
            return False
        return ctx.far_enough(item.timestamp_ms)


def apply_month_cap(results: Mapping[str, SelectionResult], month_cap: int) -> int:
    """Trim months whose selected total exceeds `month_cap`, in place.

    The day with the most picks loses its latest pick first (ties go to the
    earlier day) until the month fits or every day is down to one pick.
    Returns the number of items removed. A cap of 0 disables trimming.
    """
    if month_cap <= 0:
        return 0
    by_month: dict[str, list[SelectionResult]] = defaultdict(list)
    for day_key in sorted(results):
        by_month[day_key[:7]].append(results[day_key])

    removed = 0
    for month, days in sorted(by_month.items()):
        total = sum(r.count for r in days)
        if total <= month_cap:
            continue
        while total > month_cap:
            # max() keeps the first of equal counts, i.e. the earliest day
            top = max(days, key=lambda r: r.count)
            if top.count <= 1:
                break
            top.items.pop()
            total -= 1
            removed += 1
        logger.info("Month {} trimmed to {} (cap {})", month, total, month_cap)
    return removed
