from __future__ import annotations

import argparse
from collections.abc import Sequence
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from toolkits.timeetf.holdings.settings import BuildSettings


def _parse_now(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"--now must be an ISO date or datetime: {value!r}") from exc


def _parse_timezone(value: str) -> str:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise argparse.ArgumentTypeError(f"--timezone must be an IANA timezone name: {value!r}") from exc
    return value


def parse_args(argv: Sequence[str] | None = None, *, settings: BuildSettings | None = None) -> argparse.Namespace:
    settings = settings or BuildSettings()
    parser = argparse.ArgumentParser(
        description="Build windowed holdings series and day-over-day change summaries from dated snapshots."
    )
    parser.add_argument(
        "--history-dir",
        default=settings.history_dir,
        help="Snapshot history root containing holdings/ and shares/ folders of YYYY-MM-DD.json files.",
    )
    parser.add_argument(
        "--output-dir", default=settings.output_dir, help="Directory to write the latest JSON artifacts."
    )
    parser.add_argument(
        "--funds-config",
        default=settings.funds_config,
        help="TOML/JSON file with funds, fund_group_a, fund_group_b and thresholds (default: built-in list).",
    )
    parser.add_argument(
        "--keep-days",
        type=int,
        default=settings.history_keep_days,
        help="Number of calendar days of history kept in the windowed series.",
    )
    parser.add_argument(
        "--weight-threshold",
        type=float,
        default=settings.weight_threshold,
        help="Minimum absolute weight change (percentage points) flagged as buy/sell.",
    )
    parser.add_argument(
        "--shares-threshold",
        type=int,
        default=settings.shares_threshold,
        help="Minimum absolute share change flagged as buy/sell.",
    )
    parser.add_argument(
        "--timezone",
        type=_parse_timezone,
        default=settings.timezone,
        help="IANA timezone used for the window cutoff and timestamps.",
    )
    parser.add_argument(
        "--now",
        type=_parse_now,
        default=None,
        help="Override the build time (ISO date or datetime, interpreted in --timezone when naive).",
    )
    parser.add_argument("--export-csv-dir", help="Also write one CSV per fund for each window under this directory.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity.",
    )
    args = parser.parse_args(argv)
    if args.keep_days < 0:
        parser.error("--keep-days must be >= 0")
    return args
