"""JSON persistence for pick reports."""

from __future__ import annotations

from datetime import datetime
import json
from pathlib import Path
from typing import Any

from loguru import logger


def timestamp_tag(now: datetime | None = None) -> str:
    """Return the ``YYYYMMDD_HHMMSS`` tag used in output file names."""
    return (now or datetime.now()).strftime("%Y%m%d_%H%M%S")


def write_json(path: str | Path, data: Any) -> str:
    """Write `data` as indented UTF-8 JSON to `path`, creating parents."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    return str(out)


class ReportWriter:
    """Writes ``picked_<timestamp>.json`` into an output directory."""

    def __init__(self, output_dir: str) -> None:
        self._output_dir = Path(output_dir)

    def write(self, report: dict[str, Any], now: datetime | None = None) -> str:
        path = self._output_dir / f"picked_{timestamp_tag(now)}.json"
        written = write_json(path, report)
        logger.info("Report written: {}", written)
        return written
