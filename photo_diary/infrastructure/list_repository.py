"""File-list persistence for candidate entries.

A pick run can start from a previously produced list instead of walking a
directory. Two formats are accepted:

- ``.json``: an array of objects, each with a string ``path`` and a
  non-negative integer ``size``.
- ``.txt`` / ``.lst``: one bare path per line, size taken as 0.

Anything else raises `InvalidListInputError` before selection starts.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from loguru import logger

from photo_diary.core.errors import InvalidListInputError
from photo_diary.core.models import CandidateEntry

JSON_EXTENSIONS = {".json"}
TEXT_EXTENSIONS = {".txt", ".lst"}


def _entry_from_json(index: int, row: Any) -> CandidateEntry:
    if not isinstance(row, dict):
        raise InvalidListInputError(f"entry {index} is not an object: {row!r}")
    path = row.get("path")
    size = row.get("size")
    if not isinstance(path, str) or not path:
        raise InvalidListInputError(f"entry {index} has no string 'path'")
    if isinstance(size, bool) or not isinstance(size, int) or size < 0:
        raise InvalidListInputError(f"entry {index} has invalid 'size': {size!r}")
    return CandidateEntry(path=path, name=os.path.basename(path), size=size)


class FileListRepository:
    """Load candidate entries from JSON or plain-text file lists."""

    def load(self, list_path: str) -> list[CandidateEntry]:
        """Return the entries listed in `list_path`."""
        path = Path(list_path)
        ext = path.suffix.lower()
        if ext not in JSON_EXTENSIONS | TEXT_EXTENSIONS:
            raise InvalidListInputError(f"unsupported list file type: {path.name}")
        if ext in JSON_EXTENSIONS:
            entries = self._load_json(path)
        else:
            entries = self._load_text(path)
        logger.info("Loaded {} entries from {}", len(entries), path)
        return entries

    def _load_json(self, path: Path) -> list[CandidateEntry]:
        try:
            with path.open("r", encoding="utf-8-sig") as f:
                data = json.load(f)
        except json.JSONDecodeError as ex:
            raise InvalidListInputError(f"invalid JSON in {path}: {ex}") from ex
        except UnicodeDecodeError as ex:
            raise InvalidListInputError(f"{path} is not UTF-8 text: {ex}") from ex
        if not isinstance(data, list):
            raise InvalidListInputError(f"{path} must hold a JSON array")
        return [_entry_from_json(i, row) for i, row in enumerate(data)]

    def _load_text(self, path: Path) -> list[CandidateEntry]:
        entries: list[CandidateEntry] = []
        try:
            with path.open("r", encoding="utf-8-sig") as f:
                lines = f.readlines()
        except UnicodeDecodeError as ex:
            raise InvalidListInputError(f"{path} is not UTF-8 text: {ex}") from ex
        for line in lines:
            p = line.strip()
            if p:
                entries.append(CandidateEntry(path=p, name=os.path.basename(p), size=0))
        return entries

    def save(self, list_path: str, entries: list[CandidateEntry]) -> None:
        """Write `entries` as a JSON list consumable by `load`."""
        path = Path(list_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        rows = [{"path": e.path, "size": e.size} for e in entries]
        with path.open("w", encoding="utf-8") as f:
            json.dump(rows, f, ensure_ascii=False, indent=2)
