"""Tests for quota step tables and per-day planning."""

import math

import pytest

from photo_diary.core.rules.quota_tables import (
    INTERVAL_TABLE,
    MAX_RATIO,
    MIN_KEEP_ALL,
    RATIO_TABLE,
    StepTable,
)
from photo_diary.core.services.quota_planner import QuotaPlanner


@pytest.mark.parametrize(
    "count, ratio",
    [(10, 2), (99, 2), (100, 3), (120, 3), (499, 3), (500, 4), (999, 4), (1000, MAX_RATIO)],
)
def test_ratio_table(count, ratio):
    assert RATIO_TABLE.lookup(count) == ratio


@pytest.mark.parametrize(
    "count, interval_ms",
    [
        (3, 10_000),
        (49, 10_000),
        (50, 30_000),
        (99, 30_000),
        (120, 120_000),
        (500, 180_000),
        (1000, 240_000),
        (5000, 240_000),
    ],
)
def test_interval_table(count, interval_ms):
    assert INTERVAL_TABLE.lookup(count) == interval_ms


def test_step_table_requires_ascending_limits():
    with pytest.raises(ValueError):
        StepTable(steps=((100, 1), (50, 2)), default=3)
    with pytest.raises(ValueError):
        StepTable(steps=((50, 1), (50, 2)), default=3)


def test_small_days_are_kept_whole():
    planner = QuotaPlanner()
    for total in range(MIN_KEEP_ALL):
        plan = planner.plan("2023-01-01", total)
        assert plan.target_count == total


def test_plan_example_120_photos():
    plan = QuotaPlanner(day_cap=50).plan("2023-01-01", 120)
    assert plan.target_count == math.ceil(120 / 3) == 40
    assert plan.min_interval_ms == 2 * 60 * 1000
    assert plan.total_count == 120
    assert plan.day_key == "2023-01-01"


def test_day_cap_clamps_and_override():
    planner = QuotaPlanner(day_cap=50)
    assert planner.plan("d", 900).target_count == 50
    assert planner.plan("d", 900, day_cap=20).target_count == 20
    assert QuotaPlanner(day_cap=1000).plan("d", 5000).target_count == 1000


def test_target_never_exceeds_total():
    planner = QuotaPlanner(day_cap=10_000)
    for total in (0, 1, 9, 10, 11, 57, 100, 101, 499, 1001, 3333):
        plan = planner.plan("d", total)
        assert 0 <= plan.target_count <= plan.total_count


def test_invalid_day_cap():
    with pytest.raises(ValueError):
        QuotaPlanner(day_cap=0)
    with pytest.raises(ValueError):
        QuotaPlanner().plan("d", 100, day_cap=0)
