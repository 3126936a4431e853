"""Core service interfaces and shared data structures.

This module defines the dataclasses exchanged between the pick pipeline and
the copy executor, and the probe protocol the exclusion resolver depends on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from photo_diary.core.models import CopyInstruction


@dataclass
class CopyResult:
    """Outcome of a copy operation.

    Attributes:
        copied: Tuples of (source, destination) successfully copied.
        skipped: Tuples of (source, reason) not copied on purpose.
        failed: Tuples of (source, reason) for failures.
        report_path: Optional path to the month report file.
    """

    copied: list[tuple[str, str]] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)
    report_path: str | None = None


@dataclass
class CopyPlan:
    """Planned copy operation.

    Attributes:
        output_dir: Destination root directory.
        instructions: Files to copy, in capture-time order.
    """

    output_dir: str
    instructions: list[CopyInstruction]

    @property
    def month_counts(self) -> dict[str, int]:
        """Number of planned files per destination month."""
        counts: dict[str, int] = {}
        for ins in self.instructions:
            counts[ins.dest_month] = counts.get(ins.dest_month, 0) + 1
        return counts


@dataclass
class PickOutcome:
    """Result of one pick run.

    Attributes:
        status: ``"ok"`` or ``"nothing_to_do"``.
        message: Human readable explanation for the status.
        report: The report document; empty when nothing was selected.
        copy_plan: Instructions for the copy executor, if any.
        report_path: Where the report was written, if it was.
    """

    status: str
    message: str = ""
    report: dict[str, Any] = field(default_factory=dict)
    copy_plan: CopyPlan | None = None
    report_path: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.status == "nothing_to_do"


class MarkerProbe(Protocol):
    """Checks a single directory for exclusion marker files."""

    def __call__(self, directory: str) -> bool:
        """Return True if `directory` holds an exclusion marker.

        May raise OSError; callers treat that as "no marker".
        """
        ...
