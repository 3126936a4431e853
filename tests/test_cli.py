"""Tests for the command line entry point."""

from datetime import datetime, timedelta
import json
import os

from loguru import logger
import pytest

from photo_diary.app.cli import EXIT_OK, EXIT_USAGE, confirm, main


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger.remove()


@pytest.fixture
def settings_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"logging": {"dir": str(tmp_path / "logs")}, "walk": {"min_file_size": 0}}),
        encoding="utf-8",
    )
    return str(path)


@pytest.fixture
def library(tmp_path):
    folder = tmp_path / "library"
    folder.mkdir()
    start = datetime(2022, 10, 1, 9, 0, 0)
    for i in range(12):
        (folder / f"IMG_{start + timedelta(minutes=15 * i):%Y%m%d_%H%M%S}.jpg").write_bytes(b"x")
    return str(folder)


def _copied(out):
    return [f for _, _, files in os.walk(out) for f in files if f.endswith(".jpg")]


def test_dry_run(library, settings_file, tmp_path, capsys):
    out = str(tmp_path / "out")
    code = main([library, "-o", out, "-n", "--settings", settings_file])
    assert code == EXIT_OK
    text = capsys.readouterr().out
    assert "Total selected: 6 / 12" in text
    assert "Dry run: 6 files would be copied" in text
    assert any(name.startswith("picked_") for name in os.listdir(out))
    assert _copied(out) == []


def test_copy_with_yes(library, settings_file, tmp_path):
    out = str(tmp_path / "out")
    assert main([library, "-o", out, "-y", "--settings", settings_file]) == EXIT_OK
    assert len(_copied(out)) == 6
    assert any(name.startswith("report_") for name in os.listdir(out))


def test_declined_prompt_copies_nothing(library, settings_file, tmp_path, capsys):
    out = str(tmp_path / "out")
    code = main([library, "-o", out, "--settings", settings_file], ask=lambda _msg: "n")
    assert code == EXIT_OK
    assert "Aborted" in capsys.readouterr().out
    assert _copied(out) == []


def test_invalid_list_exits_with_usage_error(tmp_path, settings_file):
    bad = tmp_path / "files.csv"
    bad.write_text("/x.jpg\n", encoding="utf-8")
    assert main([str(bad), "--settings", settings_file]) == EXIT_USAGE


@pytest.mark.parametrize("name", ["files.txt", "files.json"])
def test_non_utf8_list_exits_with_usage_error(tmp_path, settings_file, name):
    bad = tmp_path / name
    bad.write_bytes(b"/p/\xff\xfe.jpg\n")
    assert main([str(bad), "--settings", settings_file]) == EXIT_USAGE


@pytest.mark.parametrize("output", ["blocker", "blocker/out"])
def test_unwritable_output_exits_with_usage_error(library, settings_file, tmp_path, output):
    (tmp_path / "blocker").write_text("not a directory", encoding="utf-8")
    out = str(tmp_path / output)
    assert main([library, "-o", out, "-n", "--settings", settings_file]) == EXIT_USAGE


def test_save_list_writes_scanned_candidates(library, settings_file, tmp_path):
    out = str(tmp_path / "out")
    list_path = tmp_path / "lists" / "scanned.json"
    args = [library, "-o", out, "-n", "--save-list", str(list_path)]
    code = main(args + ["--settings", settings_file])
    assert code == EXIT_OK
    rows = json.loads(list_path.read_text(encoding="utf-8"))
    assert len(rows) == 12
    assert main([str(list_path), "-o", out, "-n", "--settings", settings_file]) == EXIT_OK


def test_invalid_day_cap(library, settings_file):
    assert main([library, "--day-cap", "0", "--settings", settings_file]) == EXIT_USAGE


def test_missing_settings_file(library, tmp_path):
    assert main([library, "--settings", str(tmp_path / "missing.json")]) == EXIT_USAGE


def test_nothing_to_do(tmp_path, settings_file, capsys):
    empty = tmp_path / "empty"
    empty.mkdir()
    assert main([str(empty), "--settings", settings_file]) == EXIT_OK
    assert "Nothing to do" in capsys.readouterr().out


def test_confirm():
    assert confirm("go?", ask=lambda _m: "Y")
    assert confirm("go?", ask=lambda _m: " yes ")
    assert not confirm("go?", ask=lambda _m: "")

    def eof(_m):
        raise EOFError

    assert not confirm("go?", ask=eof)
