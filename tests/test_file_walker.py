"""Tests for recursive image discovery."""

from photo_diary.infrastructure.file_walker import is_image, is_junk, walk_images


def _write(path, size):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\0" * size)


def test_walk_filters_extension_size_and_junk(tmp_path):
    _write(tmp_path / "2021" / "IMG_20210101_120000.jpg", 2048)
    _write(tmp_path / "2021" / "sub" / "IMG_20210102_120000.HEIC", 4096)
    _write(tmp_path / "2021" / "tiny_20210103_120000.jpg", 10)
    _write(tmp_path / "2021" / "Screenshot_20210104_120000.png", 4096)
    _write(tmp_path / "2021" / "VID_20210105_120000.mp4", 4096)

    entries = list(walk_images(str(tmp_path), min_file_size=1024))
    assert [e.name for e in entries] == ["IMG_20210101_120000.jpg", "IMG_20210102_120000.HEIC"]
    assert entries[0].size == 2048
    assert entries[0].mtime > 0


def test_walk_is_sorted(tmp_path):
    for name in ("c.jpg", "a.jpg", "b.jpg"):
        _write(tmp_path / "z" / name, 1)
    _write(tmp_path / "a" / "x.jpg", 1)
    names = [e.name for e in walk_images(str(tmp_path), min_file_size=0)]
    assert names == ["x.jpg", "a.jpg", "b.jpg", "c.jpg"]


def test_helpers():
    assert is_image("a.JPEG")
    assert is_image("/x/y.webp")
    assert not is_image("a.mov")
    assert is_junk("thumb_001.jpg")
    assert is_junk("截屏2021.png")
    assert not is_junk("IMG_20210101_120000.jpg")
