"""Per-day quota planning.

Turns a day's item count into a keep target and a spacing floor using the
step tables in `core.rules.quota_tables`. Pure; no I/O.
"""

from __future__ import annotations

import math

from photo_diary.core.models import SelectionPlan
from photo_diary.core.rules.quota_tables import (
    DEFAULT_DAY_CAP,
    INTERVAL_TABLE,
    MIN_KEEP_ALL,
    RATIO_TABLE,
    StepTable,
)


class QuotaPlanner:
    """Computes `SelectionPlan`s from static tables and a day cap."""

    def __init__(
        self,
        day_cap: int = DEFAULT_DAY_CAP,
        ratio_table: StepTable = RATIO_TABLE,
        interval_table: StepTable = INTERVAL_TABLE,
        min_keep_all: int = MIN_KEEP_ALL,
    ) -> None:
        if day_cap < 1:
            raise ValueError(f"day_cap must be >= 1, got {day_cap}")
        self._day_cap = day_cap
        self._ratios = ratio_table
        self._intervals = interval_table
        self._min_keep_all = min_keep_all

    @property
    def day_cap(self) -> int:
        return self._day_cap

    def plan(self, day_key: str, total_count: int, day_cap: int | None = None) -> SelectionPlan:
        """Return the plan for a day holding `total_count` items.

        Args:
            day_key: Day identifier, passed through to the plan.
            total_count: Number of candidate items that day.
            day_cap: Optional override of the configured day cap.
        """
        total = max(0, int(total_count))
        cap = self._day_cap if day_cap is None else day_cap
        if cap < 1:
            raise ValueError(f"day_cap must be >= 1, got {cap}")

        if total < self._min_keep_all:
            target = total
        else:
            ratio = self._ratios.lookup(total)
            target = min(math.ceil(total / ratio), cap, total)

        return SelectionPlan(
            day_key=day_key,
            total_count=total,
            target_count=target,
            min_interval_ms=self._intervals.lookup(total),
        )
