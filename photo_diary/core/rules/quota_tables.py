"""Step tables that drive the per-day quota math.

Each table maps a day's item count to a value through ordered
``(limit, value)`` pairs: the first pair whose ``limit`` is above the count
wins, otherwise the table default applies. Thresholds live here as data so
they can be tuned without touching the selection code.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

# Days with fewer items than this are kept whole.
MIN_KEEP_ALL = 10
DEFAULT_DAY_CAP = 50

MAX_PER_HOUR = 10
MAX_PET_PER_DAY = 5

PET_PATTERN = re.compile(
    r"(?<![a-z])(pets?|cats?|kittens?|kitty|dogs?|doggy|puppy|puppies|animals?)(?![a-z])"
    r"|宠物|猫|狗",
    re.IGNORECASE,
)

_SECOND_MS = 1000
_MINUTE_MS = 60 * _SECOND_MS


@dataclass(frozen=True)
class StepTable:
    """Immutable ordered lookup over ``(limit, value)`` pairs."""

    steps: tuple[tuple[int, int], ...]
    default: int

    def __post_init__(self) -> None:
        limits = [limit for limit, _ in self.steps]
        if limits != sorted(set(limits)):
            raise ValueError(f"step limits must be strictly ascending: {limits}")

    def lookup(self, count: int) -> int:
        """Return the value of the first step with ``count < limit``."""
        for limit, value in self.steps:
            if count < limit:
                return value
        return self.default


# Keep one in `ratio` items; larger days are thinned harder.
RATIO_TABLE = StepTable(steps=((100, 2), (500, 3), (1000, 4)), default=5)
MAX_RATIO = RATIO_TABLE.default

# Busy days usually contain burst sequences, so they get wider spacing.
INTERVAL_TABLE = StepTable(
    steps=(
        (50, 10 * _SECOND_MS),
        (100, 30 * _SECOND_MS),
        (500, 2 * _MINUTE_MS),
        (1000, 3 * _MINUTE_MS),
    ),
    default=4 * _MINUTE_MS,
)
