#!/usr/bin/env python3
"""Run the formatters, linters and test suite for photo-diary in one go.

Checks run in order: black, isort, ruff, pylint, pytest. With ``--fix`` the
formatters rewrite files instead of only checking them. ``--skip`` drops
checks by name, e.g. ``--skip pylint --skip pytest``.

Exit status is 0 only when every selected check passes.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
import subprocess
import sys

ROOT = Path(__file__).parent
PACKAGE = "photo_diary"
RULE = "-" * 72


@dataclass(frozen=True)
class Check:
    name: str
    args: tuple[str, ...]
    fix_args: tuple[str, ...] | None = None

    def command(self, fix: bool) -> list[str]:
        args = self.fix_args if fix and self.fix_args is not None else self.args
        return [sys.executable, "-m", self.name, *args]


CHECKS = (
    Check("black", (".", "--check"), fix_args=(".",)),
    Check("isort", (".", "--check-only"), fix_args=(".",)),
    Check("ruff", ("check", "."), fix_args=("check", ".", "--fix")),
    Check("pylint", (PACKAGE,)),
    Check("pytest", ("-q",)),
)


def run_check(check: Check, fix: bool) -> tuple[bool, str]:
    cmd = check.command(fix)
    print(f"\n{RULE}\n[{check.name}] {' '.join(cmd[1:])}")
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, check=False, cwd=ROOT)
    except OSError as ex:
        print(f"[{check.name}] could not start: {ex}")
        return False, str(ex)
    output = (proc.stdout + proc.stderr).strip()
    ok = proc.returncode == 0
    print(f"[{check.name}] {'ok' if ok else f'FAILED (exit {proc.returncode})'}")
    if output:
        print(output)
    return ok, output


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Run all photo-diary checks.")
    ap.add_argument("--fix", action="store_true", help="Let black, isort and ruff rewrite files")
    ap.add_argument(
        "--skip",
        action="append",
        default=[],
        choices=[c.name for c in CHECKS],
        help="Skip a check (repeatable)",
    )
    args = ap.parse_args(argv)

    results = [(c.name, *run_check(c, args.fix)) for c in CHECKS if c.name not in args.skip]

    print(f"\n{RULE}\nSummary")
    for name, ok, _ in results:
        print(f"  {name:<8} {'pass' if ok else 'FAIL'}")
    failed = [name for name, ok, _ in results if not ok]
    if failed:
        print(f"\nFailed: {', '.join(failed)}")
        return 1
    print("\nAll checks passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
