"""Core domain models for candidate files, day buckets and selections."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class CandidateEntry:
    """A file handed in by a walker or a list file, before date parsing."""

    path: str
    name: str
    size: int = 0
    mtime: float = 0.0


@dataclass(frozen=True)
class MediaItem:
    """A candidate with a validated capture timestamp."""

    path: str
    name: str
    size: int
    captured_at: datetime
    day_key: str

    @property
    def timestamp_ms(self) -> int:
        """Capture time as epoch milliseconds."""
        return int(self.captured_at.timestamp() * 1000)

    @property
    def hour_key(self) -> str:
        return self.captured_at.strftime("%Y-%m-%d-%H")

    @property
    def month_key(self) -> str:
        return self.day_key[:7]

    @property
    def year_key(self) -> str:
        return self.day_key[:4]


@dataclass(frozen=True)
class DayBucket:
    """All items of one calendar day, ordered by capture time."""

    day_key: str
    items: tuple[MediaItem, ...]

    @property
    def total_count(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class SelectionPlan:
    """Target keep-count and spacing floor for one day.

    Attributes:
        day_key: Day the plan applies to (``YYYY-MM-DD``).
        total_count: Number of candidate items that day.
        target_count: Upper bound on the number of picks.
        min_interval_ms: Minimum gap between any two picks.
    """

    day_key: str
    total_count: int
    target_count: int
    min_interval_ms: int


@dataclass
class SelectionResult:
    """Picked items for one day, ordered by capture time."""

    day_key: str
    items: list[MediaItem] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class ExclusionResult:
    """Outcome of directory exclusion filtering.

    Attributes:
        included: Candidate paths whose directory is not excluded.
        excluded_dirs: Sorted parent directories found to be excluded.
    """

    included: list[str]
    excluded_dirs: list[str]


@dataclass(frozen=True)
class CopyInstruction:
    """One file to copy into ``<output>/<dest_year>/<dest_month>/``."""

    source: str
    dest_year: str
    dest_month: str
