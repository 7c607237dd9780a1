from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError

from log_rotator.config import load_settings
from log_rotator.core.logging_setup import setup_logging
from log_rotator.rotator import LogRotator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Delete dated logs older than the retention window")
    parser.add_argument("--log-dir", default=None, help="directory holding name-YYYY-MM.ext logs")
    parser.add_argument("--ext", action="append", dest="extensions", help="extension to rotate, repeatable")
    parser.add_argument("--retention-months", type=int, default=None)
    parser.add_argument("--dry-run", action="store_true", default=None)
    parser.add_argument("--pattern", default=None, help="file name regex with name/year/month captures")
    parser.add_argument("--name-index", type=int, default=None)
    parser.add_argument("--year-index", type=int, default=None)
    parser.add_argument("--month-index", type=int, default=None)
    parser.add_argument("--app-log-dir", default=None, help="also write rotator output to this directory")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings(args.log_dir)
    app_log_dir = Path(args.app_log_dir) if args.app_log_dir else settings.app_log_dir
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, app_log_dir)

    kwargs = settings.to_rotator_kwargs()
    overrides = {
        "extensions": args.extensions,
        "retention": args.retention_months,
        "dry_run": args.dry_run,
        "pattern": args.pattern,
        "name_index": args.name_index,
        "year_index": args.year_index,
        "month_index": args.month_index,
    }
    kwargs.update({key: value for key, value in overrides.items() if value is not None})

    try:
        rotator = LogRotator(settings.log_dir, **kwargs)
    except ValidationError as exc:
        parser.error(str(exc))

    result = rotator.rotate()
    if not result.ready:
        print("error=log directory unavailable")
        return 1

    counts = result.counts()
    print(
        f"deleted={counts['DELETED']} would_delete={counts['WOULD_DELETE']} "
        f"failed={counts['DELETE_FAILED']} retained={counts['RETAINED']} skipped={counts['SKIPPED']}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
