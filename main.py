from __future__ import annotations

from photo_diary.app.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
