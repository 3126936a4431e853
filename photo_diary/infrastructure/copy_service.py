"""Copy planning and execution service.

Provides a high-level API to turn picked items into a copy plan, copy files
into ``<output>/<year>/<month>/`` while never overwriting existing files, and
write a JSON report mapping each month to the copied source paths.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
import os
import shutil

from loguru import logger

from photo_diary.core.models import CopyInstruction
from photo_diary.core.services.interfaces import CopyPlan, CopyResult
from photo_diary.infrastructure.report_writer import timestamp_tag, write_json


class CopyService:
    """Coordinates copy operations and month report logging."""

    def plan_copy(self, instructions: Iterable[CopyInstruction], output_dir: str) -> CopyPlan:
        """Compute a copy plan, dropping duplicate sources."""
        seen: set[str] = set()
        unique: list[CopyInstruction] = []
        for ins in instructions:
            if ins.source in seen:
                continue
            seen.add(ins.source)
            unique.append(ins)
        return CopyPlan(output_dir=output_dir, instructions=unique)

    @staticmethod
    def destination(plan: CopyPlan, ins: CopyInstruction) -> str:
        return os.path.join(
            plan.output_dir, ins.dest_year, ins.dest_month, os.path.basename(ins.source)
        )

    def copy_files(self, plan: CopyPlan) -> CopyResult:
        """Copy every planned file and report per-file results."""
        result = CopyResult()
        claimed: set[str] = set()
        for ins in plan.instructions:
            dst = self.destination(plan, ins)
            key = os.path.normcase(os.path.abspath(dst))
            if key in claimed:
                logger.warning("Name collision, skipped: {} -> {}", ins.source, dst)
                result.skipped.append((ins.source, "Name collision in this run"))
                continue
            claimed.add(key)
            if os.path.exists(dst):
                logger.info("Exists, skipped: {}", dst)
                result.skipped.append((ins.source, "Destination exists"))
                continue
            try:
                os.makedirs(os.path.dirname(dst), exist_ok=True)
                shutil.copy2(ins.source, dst)
                result.copied.append((ins.source, dst))
                logger.debug("Copied: {} -> {}", ins.source, dst)
            except (OSError, shutil.Error) as ex:
                logger.error("Copy failed for {}: {}", ins.source, ex)
                result.failed.append((ins.source, str(ex)))
        return result

    def execute_copy(self, plan: CopyPlan, now: datetime | None = None) -> CopyResult:
        """Execute the copy plan and write ``report_<timestamp>.json``.

        Args:
            plan: The copy plan produced by `plan_copy`.
            now: Optional clock value for the report file name.
        """
        result = self.copy_files(plan)
        month_of = {ins.source: ins.dest_month for ins in plan.instructions}
        by_month: dict[str, list[str]] = {}
        for src, _dst in result.copied:
            by_month.setdefault(month_of[src], []).append(src)
        try:
            report_path = os.path.join(plan.output_dir, f"report_{timestamp_tag(now)}.json")
            result.report_path = write_json(report_path, dict(sorted(by_month.items())))
            logger.info(
                "Copy report written: {} ({} copied, {} skipped, {} failed)",
                result.report_path,
                len(result.copied),
                len(result.skipped),
                len(result.failed),
            )
        except (OSError, ValueError) as ex:
            logger.error("Write copy report failed: {}", ex)
        return result
