"""Command line entry point for building a photo diary."""

from __future__ import annotations

import argparse
from collections.abc import Callable
import sys

from loguru import logger

from photo_diary.app.pick_vm import PickOptions, PickVM
from photo_diary.core.errors import InvalidConfigError, InvalidListInputError
from photo_diary.infrastructure.list_repository import FileListRepository
from photo_diary.infrastructure.logging import find_latest_log_file, init_logging
from photo_diary.infrastructure.settings import JsonSettings
from photo_diary.infrastructure.utils import format_size

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="photo-diary",
        description="Pick a bounded, evenly spread set of photos for every day.",
    )
    ap.add_argument("input", help="Photo directory, or a .json/.txt file list")
    ap.add_argument("-o", "--output", dest="output_dir", help="Output directory")
    ap.add_argument("--day-cap", type=int, help="Maximum picks per day (default 50)")
    ap.add_argument("--month-cap", type=int, help="Maximum picks per month, 0 disables")
    ap.add_argument("-j", "--jobs", dest="concurrency", type=int, help="Parallel workers")
    ap.add_argument("--min-size", dest="min_file_size", type=int, help="Minimum file size in bytes")
    ap.add_argument(
        "--exif-fallback",
        action="store_true",
        default=None,
        help="Read EXIF when the file name has no date",
    )
    ap.add_argument("--save-list", help="Also write the scanned candidates to this JSON list")
    ap.add_argument("-n", "--dry-run", action="store_true", help="Report only, copy nothing")
    ap.add_argument("-y", "--yes", action="store_true", help="Copy without asking")
    ap.add_argument("--settings", help="Path to a settings JSON file")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug output on the console")
    return ap


def confirm(message: str, ask: Callable[[str], str] = input) -> bool:
    """Ask a yes/no question; anything but y/yes means no."""
    try:
        answer = ask(f"{message} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def main(argv: list[str] | None = None, ask: Callable[[str], str] = input) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = JsonSettings(args.settings)
    except (OSError, ValueError) as ex:
        print(f"Cannot read settings: {ex}", file=sys.stderr)
        return EXIT_USAGE

    init_logging(
        settings.get("logging.dir"),
        level=str(settings.get("logging.level", "INFO")),
        verbose=args.verbose,
    )
    logger.debug("Arguments: {}", vars(args))
    for key in settings.unknown_keys:
        logger.warning("Unknown setting ignored: {}", key)

    try:
        options = PickOptions.from_settings(
            settings,
            day_cap=args.day_cap,
            month_cap=args.month_cap,
            concurrency=args.concurrency,
            min_file_size=args.min_file_size,
            exif_fallback=args.exif_fallback,
            output_dir=args.output_dir,
            dry_run=args.dry_run,
        )
        vm = PickVM(options)
        loaded = None
        if args.save_list:
            loaded = vm.load_entries(args.input)
            FileListRepository().save(args.save_list, loaded[0])
            logger.info("Candidate list written: {}", args.save_list)
        outcome = vm.run(args.input, loaded=loaded)
    except (InvalidListInputError, InvalidConfigError) as ex:
        logger.error("{}", ex)
        return EXIT_USAGE
    except OSError as ex:
        # missing input, unwritable output or list path
        logger.error("{}", ex)
        return EXIT_USAGE
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_INTERRUPTED

    if outcome.is_empty:
        print(f"Nothing to do: {outcome.message}")
        return EXIT_OK

    print(vm.summary_text(outcome))
    print(f"\nReport: {outcome.report_path}")

    plan = outcome.copy_plan
    if plan is None or not plan.instructions:
        return EXIT_OK
    if options.dry_run:
        print(f"Dry run: {len(plan.instructions)} files would be copied to {plan.output_dir}")
        return EXIT_OK

    total_bytes = sum(item.size for day in vm.days for item in day.result.items)
    if not args.yes and not confirm(
        f"Copy {len(plan.instructions)} files ({format_size(total_bytes)}) to {plan.output_dir}?",
        ask,
    ):
        print("Aborted, nothing copied.")
        return EXIT_OK

    result = vm.execute_copy(outcome)
    print(
        f"Copied {len(result.copied)}, skipped {len(result.skipped)}, failed {len(result.failed)}"
    )
    if result.report_path:
        print(f"Copy report: {result.report_path}")
    if result.failed:
        log_file = find_latest_log_file(settings.get("logging.dir"))
        if log_file:
            print(f"See log for failures: {log_file}")
    return EXIT_OK
