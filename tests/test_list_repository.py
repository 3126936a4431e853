"""Tests for loading and saving candidate file lists."""

import json

import pytest

from photo_diary.core.errors import InvalidListInputError
from photo_diary.core.models import CandidateEntry
from photo_diary.infrastructure.list_repository import FileListRepository


def test_load_json(tmp_path):
    path = tmp_path / "files.json"
    path.write_text(
        json.dumps([{"path": "/p/IMG_20210101_120000.jpg", "size": 123, "extra": True}]),
        encoding="utf-8",
    )
    entries = FileListRepository().load(str(path))
    assert entries == [
        CandidateEntry(path="/p/IMG_20210101_120000.jpg", name="IMG_20210101_120000.jpg", size=123)
    ]


def test_load_text_skips_blank_lines(tmp_path):
    path = tmp_path / "files.txt"
    path.write_text("/p/a.jpg\n\n  /p/b.jpg  \n", encoding="utf-8")
    entries = FileListRepository().load(str(path))
    assert [(e.path, e.name, e.size) for e in entries] == [
        ("/p/a.jpg", "a.jpg", 0),
        ("/p/b.jpg", "b.jpg", 0),
    ]


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        json.dumps({"path": "/p/a.jpg", "size": 1}),
        json.dumps(["/p/a.jpg"]),
        json.dumps([{"size": 1}]),
        json.dumps([{"path": "/p/a.jpg"}]),
        json.dumps([{"path": "/p/a.jpg", "size": -1}]),
        json.dumps([{"path": "/p/a.jpg", "size": "12"}]),
        json.dumps([{"path": "/p/a.jpg", "size": True}]),
    ],
)
def test_load_json_rejects_bad_shape(tmp_path, payload):
    path = tmp_path / "files.json"
    path.write_text(payload, encoding="utf-8")
    with pytest.raises(InvalidListInputError):
        FileListRepository().load(str(path))


def test_unsupported_extension(tmp_path):
    path = tmp_path / "files.csv"
    path.write_text("/p/a.jpg\n", encoding="utf-8")
    with pytest.raises(InvalidListInputError):
        FileListRepository().load(str(path))


def test_save_then_load(tmp_path):
    repo = FileListRepository()
    entries = [
        CandidateEntry(path="/照片/IMG_20210101_120000.jpg", name="IMG_20210101_120000.jpg", size=9)
    ]
    target = tmp_path / "out" / "list.json"
    repo.save(str(target), entries)
    assert repo.load(str(target)) == entries


@pytest.mark.parametrize("name", ["files.txt", "files.json"])
def test_non_utf8_list_is_invalid_input(tmp_path, name):
    path = tmp_path / name
    path.write_bytes(b"/p/\xff\xfe.jpg\n")
    with pytest.raises(InvalidListInputError):
        FileListRepository().load(str(path))


def test_byte_order_mark_is_ignored(tmp_path):
    path = tmp_path / "files.txt"
    path.write_bytes(b"\xef\xbb\xbf/p/a.jpg\n")
    entries = FileListRepository().load(str(path))
    assert [e.path for e in entries] == ["/p/a.jpg"]
