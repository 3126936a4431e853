"""ViewModel orchestrating candidate loading, selection and reporting."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
import os
from pathlib import Path
import tempfile
from typing import Any

from loguru import logger

from photo_diary.core.errors import InvalidConfigError
from photo_diary.core.models import (
    CandidateEntry,
    DayBucket,
    MediaItem,
    SelectionPlan,
    SelectionResult,
)
from photo_diary.core.services import date_extractor
from photo_diary.core.services.exclusion_resolver import ExclusionResolver
from photo_diary.core.services.interfaces import CopyResult, MarkerProbe, PickOutcome
from photo_diary.core.services.quota_planner import QuotaPlanner
from photo_diary.core.services.report_builder import ReportBuilder
from photo_diary.core.services.selection_engine import (
    SelectionEngine,
    apply_month_cap,
    group_by_day,
)
from photo_diary.infrastructure.copy_service import CopyService
from photo_diary.infrastructure.file_walker import walk_images
from photo_diary.infrastructure.list_repository import FileListRepository
from photo_diary.infrastructure.marker_probe import FsMarkerProbe
from photo_diary.infrastructure.report_writer import ReportWriter
from photo_diary.infrastructure.utils import get_exif_datetime_original


def default_output_dir() -> str:
    return str(Path(tempfile.gettempdir()) / "photo_diary")


def default_concurrency() -> int:
    return min(32, (os.cpu_count() or 1) * 2)


def _as_int(name: str, value: Any, minimum: int) -> int:
    if isinstance(value, bool):
        raise InvalidConfigError(f"{name} must be an integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError) as ex:
        raise InvalidConfigError(f"{name} must be an integer, got {value!r}") from ex
    if number < minimum:
        raise InvalidConfigError(f"{name} must be >= {minimum}, got {number}")
    return number


@dataclass(frozen=True)
class PickOptions:
    """Validated run configuration."""

    day_cap: int = 50
    month_cap: int = 0
    concurrency: int = 8
    min_file_size: int = 100 * 1024
    exif_fallback: bool = False
    output_dir: str = ""
    dry_run: bool = False

    @classmethod
    def from_settings(cls, settings: Any, **overrides: Any) -> PickOptions:
        """Build options from `settings`, letting non-None `overrides` win.

        Raises:
            InvalidConfigError: If a value is missing its type or range.
        """

        def pick(key: str, name: str) -> Any:
            value = overrides.get(name)
            return settings.get(key) if value is None else value

        concurrency = _as_int("concurrency", pick("pick.concurrency", "concurrency") or 0, 0)
        output_dir = pick("output.dir", "output_dir") or default_output_dir()
        return cls(
            day_cap=_as_int("day_cap", pick("pick.day_cap", "day_cap"), 1),
            month_cap=_as_int("month_cap", pick("pick.month_cap", "month_cap") or 0, 0),
            concurrency=concurrency or default_concurrency(),
            min_file_size=_as_int("min_file_size", pick("walk.min_file_size", "min_file_size"), 0),
            exif_fallback=bool(pick("date.exif_fallback", "exif_fallback")),
            output_dir=os.path.expanduser(os.path.expandvars(str(output_dir))),
            dry_run=bool(overrides.get("dry_run") or False),
        )


@dataclass(frozen=True)
class DayPick:
    """Plan and selection for one day."""

    bucket: DayBucket
    plan: SelectionPlan
    result: SelectionResult


class PickVM:
    """Main pick pipeline.

    Mediates between candidate sources (directory walk or list file), the
    core selection services and the report/copy infrastructure.
    """

    def __init__(
        self,
        options: PickOptions,
        list_repo: FileListRepository | None = None,
        probe: MarkerProbe | None = None,
        engine: SelectionEngine | None = None,
        builder: ReportBuilder | None = None,
        copier: CopyService | None = None,
        walker: Callable[[str, int], Iterable[CandidateEntry]] = walk_images,
        exif_reader: Callable[[str], datetime | None] = get_exif_datetime_original,
    ) -> None:
        self.options = options
        self._list_repo = list_repo or FileListRepository()
        self._probe = probe or FsMarkerProbe()
        self._planner = QuotaPlanner(day_cap=options.day_cap)
        self._engine = engine or SelectionEngine()
        self._builder = builder or ReportBuilder()
        self._copier = copier or CopyService()
        self._walker = walker
        self._exif_reader = exif_reader
        self.days: list[DayPick] = []

    def load_entries(self, input_path: str) -> tuple[list[CandidateEntry], str]:
        """Return candidate entries and the root used for exclusion checks.

        A directory is walked; a file is read as a file list.
        """
        if os.path.isdir(input_path):
            root = os.path.abspath(input_path)
            return list(self._walker(root, self.options.min_file_size)), root
        if not os.path.exists(input_path):
            raise FileNotFoundError(f"input not found: {input_path}")
        entries = self._list_repo.load(input_path)
        if not entries:
            return entries, os.path.dirname(os.path.abspath(input_path))
        root = os.path.commonpath([os.path.dirname(os.path.abspath(e.path)) for e in entries])
        return entries, root

    def parse_dates(self, entries: Iterable[CandidateEntry]) -> tuple[list[MediaItem], int]:
        """Return dated items and the number of entries dropped for no date."""
        items: list[MediaItem] = []
        no_date = 0
        for entry in entries:
            match = date_extractor.extract(entry.name)
            if match is None and self.options.exif_fallback:
                match = date_extractor.from_datetime(self._exif_reader(entry.path))
            if match is None:
                no_date += 1
                continue
            items.append(date_extractor.to_media_item(entry, match))
        return items, no_date

    def pick_day(self, bucket: DayBucket) -> DayPick:
        plan = self._planner.plan(bucket.day_key, bucket.total_count)
        result = self._engine.select(bucket, plan)
        logger.debug(
            "{}: {} -> {} (target {}, spacing {} ms)",
            bucket.day_key,
            plan.total_count,
            result.count,
            plan.target_count,
            plan.min_interval_ms,
        )
        return DayPick(bucket=bucket, plan=plan, result=result)

    def pick_days(self, buckets: list[DayBucket]) -> list[DayPick]:
        """Plan and select every day with bounded parallelism, in day order."""
        if not buckets:
            return []
        workers = min(self.options.concurrency, len(buckets))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pick") as pool:
            return list(pool.map(self.pick_day, buckets))

    def run(
        self,
        input_path: str,
        now: datetime | None = None,
        loaded: tuple[list[CandidateEntry], str] | None = None,
    ) -> PickOutcome:
        """Run the whole pipeline for `input_path` and write the JSON report.

        `loaded` is a prior `load_entries(input_path)` result; when given the
        input is not walked or read again.
        """
        entries, root = loaded if loaded is not None else self.load_entries(input_path)
        # a list file may name the same path twice
        entries = list({e.path: e for e in entries}.values())
        if not entries:
            return PickOutcome(status="nothing_to_do", message="No candidate files found.")

        resolver = ExclusionResolver(self._probe, concurrency=self.options.concurrency)
        exclusion = resolver.resolve([e.path for e in entries], root)
        kept = set(exclusion.included)
        scanned = len(entries)
        entries = [e for e in entries if e.path in kept]
        if not entries:
            return PickOutcome(
                status="nothing_to_do", message="All candidate files are in excluded directories."
            )

        items, no_date = self.parse_dates(entries)
        if no_date:
            logger.info("{} files without a usable date were dropped", no_date)
        if not items:
            return PickOutcome(
                status="nothing_to_do", message="No date could be extracted from any file name."
            )

        self.days = self.pick_days(group_by_day(items))
        results = {d.bucket.day_key: d.result for d in self.days}
        trimmed = apply_month_cap(results, self.options.month_cap)

        report = self._builder.build(results, Counter(item.day_key for item in items))
        selected = sum(r.count for r in results.values())
        report["summary"] = {
            "root": root,
            "candidates": scanned,
            "excluded_files": scanned - len(entries),
            "excluded_dirs": exclusion.excluded_dirs,
            "no_date": no_date,
            "dated": len(items),
            "days": len(results),
            "selected": selected,
            "month_trimmed": trimmed,
        }
        report["generated_at"] = (now or datetime.now()).isoformat(timespec="seconds")

        copy_plan = self._copier.plan_copy(
            self._builder.build_copy_plan(results), self.options.output_dir
        )
        report_path = ReportWriter(self.options.output_dir).write(report, now)
        logger.info(
            "Picked {} of {} dated files over {} days", selected, len(items), len(results)
        )
        return PickOutcome(
            status="ok",
            message=f"{selected} files selected.",
            report=report,
            copy_plan=copy_plan,
            report_path=report_path,
        )

    def execute_copy(self, outcome: PickOutcome) -> CopyResult:
        """Copy the files of a successful, non dry-run outcome."""
        if outcome.copy_plan is None or self.options.dry_run:
            return CopyResult()
        return self._copier.execute_copy(outcome.copy_plan)

    def summary_text(self, outcome: PickOutcome) -> str:
        return self._builder.format_summary(outcome.report)
