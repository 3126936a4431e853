"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

DEFAULTS: dict[str, Any] = {
    "pick": {
        "day_cap": 50,
        "month_cap": 0,
        "concurrency": 0,
    },
    "walk": {
        "min_file_size": 100 * 1024,
    },
    "date": {
        "exif_fallback": False,
    },
    "output": {
        "dir": None,
    },
    "logging": {
        "dir": None,
        "level": "INFO",
    },
}


def _flatten(data: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict) and value:
            flat.update(_flatten(value, f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


class JsonSettings:
    """JSON settings layered over `DEFAULTS`, read by dotted key.

    Nested objects in the file are flattened on load, so ``{"pick":
    {"day_cap": 20}}`` is read back as ``get("pick.day_cap")``. Keys the file
    sets that have no default are kept and reported by `unknown_keys`.
    Without a path only the defaults are used.
    """

    def __init__(self, settings_path: str | Path | None = None) -> None:
        self._path = Path(settings_path) if settings_path else None
        self._values = _flatten(DEFAULTS)
        self._unknown: list[str] = []
        if self._path is None:
            return
        if not self._path.exists():
            raise FileNotFoundError(f"settings file not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError(f"settings file must hold a JSON object: {self._path}")
        for key, value in _flatten(loaded).items():
            if key not in self._values:
                self._unknown.append(key)
            self._values[key] = value

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def unknown_keys(self) -> list[str]:
        """Dotted keys from the file that no default declares."""
        return list(self._unknown)

    def get(self, key: str, default: Any | None = None) -> Any:
        return self._values.get(key, default)
