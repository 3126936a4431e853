"""Tests for copy planning, execution and the month report."""

from datetime import datetime
import json
import os

from photo_diary.core.models import CopyInstruction
from photo_diary.infrastructure.copy_service import CopyService


def _src(tmp_path, name, data=b"photo"):
    path = tmp_path / "src" / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return str(path)


def test_plan_drops_duplicate_sources(tmp_path):
    ins = CopyInstruction(source="/a.jpg", dest_year="2021", dest_month="2021-01")
    plan = CopyService().plan_copy([ins, ins], str(tmp_path))
    assert plan.instructions == [ins]
    assert plan.month_counts == {"2021-01": 1}


def test_execute_copies_skips_existing_and_writes_report(tmp_path):
    out = tmp_path / "out"
    a = _src(tmp_path, "IMG_20210101_120000.jpg")
    b = _src(tmp_path, "IMG_20210201_120000.jpg")
    existing = out / "2021" / "2021-02" / "IMG_20210201_120000.jpg"
    existing.parent.mkdir(parents=True)
    existing.write_bytes(b"old")

    service = CopyService()
    plan = service.plan_copy(
        [
            CopyInstruction(source=a, dest_year="2021", dest_month="2021-01"),
            CopyInstruction(source=b, dest_year="2021", dest_month="2021-02"),
        ],
        str(out),
    )
    result = service.execute_copy(plan, now=datetime(2024, 1, 2, 3, 4, 5))

    copied = out / "2021" / "2021-01" / "IMG_20210101_120000.jpg"
    assert result.copied == [(a, str(copied))]
    assert copied.read_bytes() == b"photo"
    assert result.skipped == [(b, "Destination exists")]
    assert existing.read_bytes() == b"old"
    assert result.report_path == os.path.join(str(out), "report_20240102_030405.json")
    with open(result.report_path, encoding="utf-8") as f:
        assert json.load(f) == {"2021-01": [a]}


def test_name_collision_and_missing_source(tmp_path):
    out = tmp_path / "out"
    first = _src(tmp_path, "one/IMG_20210101_120000.jpg")
    second = _src(tmp_path, "two/IMG_20210101_120000.jpg")
    missing = str(tmp_path / "src" / "gone.jpg")

    service = CopyService()
    plan = service.plan_copy(
        [
            CopyInstruction(source=first, dest_year="2021", dest_month="2021-01"),
            CopyInstruction(source=second, dest_year="2021", dest_month="2021-01"),
            CopyInstruction(source=missing, dest_year="2021", dest_month="2021-01"),
        ],
        str(out),
    )
    result = service.execute_copy(plan)
    assert [src for src, _ in result.copied] == [first]
    assert result.skipped == [(second, "Name collision in this run")]
    assert [src for src, _ in result.failed] == [missing]
