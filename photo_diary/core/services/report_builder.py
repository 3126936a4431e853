"""Aggregation of before/after counts and the hierarchical report document.

The report has two parallel trees:

- ``stats``: ``{year: {total, selected, months: {month: {total, selected,
  days: {day: {total, selected}}}}}}`` for every year present in the source.
- ``files``: ``{year: {month: {total, selected, files: [...]}}}`` listing the
  picked paths; only months with at least one pick appear.

Both trees are filled from the same per-day counts, bottom-up, so the selected
totals agree at every level.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from photo_diary.core.models import CopyInstruction, SelectionResult

CONSOLE_MAX_DAYS = 50


class ReportBuilder:
    """Builds the report dict and derived views from per-day selections."""

    def build(
        self,
        results_by_day: Mapping[str, SelectionResult],
        source_counts: Mapping[str, int],
    ) -> dict[str, Any]:
        """Return ``{"stats": ..., "files": ...}`` for the given run.

        Args:
            results_by_day: Selection per day key.
            source_counts: Number of dated candidates per day key.
        """
        stats: dict[str, Any] = {}
        for day in sorted(set(source_counts) | set(results_by_day)):
            result = results_by_day.get(day)
            selected = result.count if result is not None else 0
            total = int(source_counts.get(day, selected))
            year, month = day[:4], day[:7]

            year_node = stats.setdefault(year, {"total": 0, "selected": 0, "months": {}})
            month_node = year_node["months"].setdefault(
                month, {"total": 0, "selected": 0, "days": {}}
            )
            month_node["days"][day] = {"total": total, "selected": selected}
            month_node["total"] += total
            month_node["selected"] += selected
            year_node["total"] += total
            year_node["selected"] += selected

        files: dict[str, Any] = {year: {} for year in stats}
        for day in sorted(results_by_day):
            result = results_by_day[day]
            if not result.items:
                continue
            year, month = day[:4], day[:7]
            month_stats = stats[year]["months"][month]
            node = files[year].setdefault(
                month, {"total": month_stats["total"], "selected": 0, "files": []}
            )
            for item in result.items:
                node["files"].append(item.path)
                node["selected"] += 1

        return {"stats": stats, "files": files}

    def build_copy_plan(self, results_by_day: Mapping[str, SelectionResult]) -> list[CopyInstruction]:
        """Return copy instructions for every pick, in capture-time order."""
        plan: list[CopyInstruction] = []
        for day in sorted(results_by_day):
            for item in results_by_day[day].items:
                plan.append(
                    CopyInstruction(
                        source=item.path, dest_year=item.year_key, dest_month=item.month_key
                    )
                )
        return plan

    def format_summary(self, report: Mapping[str, Any], max_days: int = CONSOLE_MAX_DAYS) -> str:
        """Render selected counts by year, month and day as plain text.

        The per-day section is replaced by a one-line note when the report
        spans more than `max_days` days.
        """
        stats: Mapping[str, Any] = report.get("stats", {})
        total = sum(int(y.get("selected", 0)) for y in stats.values())
        source_total = sum(int(y.get("total", 0)) for y in stats.values())
        lines = [f"Total selected: {total} / {source_total}", "", "By year:"]
        for year, node in sorted(stats.items()):
            lines.append(f"  {year}: {node['selected']} / {node['total']}")

        lines.extend(["", "By month:"])
        day_rows: list[str] = []
        day_count = 0
        for _year, node in sorted(stats.items()):
            for month, month_node in sorted(node["months"].items()):
                lines.append(f"  {month}: {month_node['selected']} / {month_node['total']}")
                parts = [
                    f"{day[8:]}:{day_node['selected']}"
                    for day, day_node in sorted(month_node["days"].items())
                ]
                day_count += len(parts)
                day_rows.append(f"  {month}: {', '.join(parts)}")

        lines.extend(["", "By day:"])
        if day_count <= max_days:
            lines.extend(day_rows)
        else:
            lines.append(f"  too many days ({day_count}), see the JSON report")
        return "\n".join(lines)
