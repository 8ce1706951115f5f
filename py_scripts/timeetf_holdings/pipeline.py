from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from toolkits.timeetf.holdings import (
    FundUniverse,
    JsonSnapshotStore,
    Mode,
    Report,
    RunMetadata,
    SnapshotKind,
    WindowedSeries,
    assemble_report,
    build_metadata,
    build_window,
    load_fund_universe,
    write_json,
)
from toolkits.timeetf.holdings.frame import write_series_csv

logger = logging.getLogger("holdings_build")

WINDOW_FILES = {
    SnapshotKind.HOLDINGS: "holdings.json",
    SnapshotKind.SHARES: "shares.json",
}
SUMMARY_FILES = {
    Mode.WEIGHT: "summaries_weight.json",
    Mode.SHARES: "summaries_shares.json",
}
# Weight summaries come from the holdings history, share summaries from the shares history.
SUMMARY_SOURCES = {
    Mode.WEIGHT: SnapshotKind.HOLDINGS,
    Mode.SHARES: SnapshotKind.SHARES,
}
METADATA_FILE = "last_updated.json"


@dataclass(frozen=True)
class PipelineConfig:
    history_dir: Path
    output_dir: Path
    keep_days: int
    timezone: str
    now: datetime
    universe: FundUniverse
    export_csv_dir: Path | None = None


@dataclass
class BuildResult:
    windows: dict[SnapshotKind, WindowedSeries | None]
    reports: dict[Mode, Report | None]
    metadata: RunMetadata | None = None
    written: list[Path] = field(default_factory=list)


def _resolve_now(now: datetime | None, timezone: str) -> datetime:
    tz = ZoneInfo(timezone)
    if now is None:
        return datetime.now(tz)
    if now.tzinfo is None:
        return now.replace(tzinfo=tz)
    return now.astimezone(tz)


def build_config(args: argparse.Namespace) -> PipelineConfig:
    universe = load_fund_universe(args.funds_config).with_thresholds(
        weight=args.weight_threshold, shares=args.shares_threshold
    )
    return PipelineConfig(
        history_dir=Path(args.history_dir),
        output_dir=Path(args.output_dir),
        keep_days=args.keep_days,
        timezone=args.timezone,
        now=_resolve_now(args.now, args.timezone),
        universe=universe,
        export_csv_dir=Path(args.export_csv_dir) if args.export_csv_dir else None,
    )


def _write_windows(store: JsonSnapshotStore, config: PipelineConfig, result: BuildResult) -> None:
    for kind, filename in WINDOW_FILES.items():
        series = build_window(store, kind, config.keep_days, config.now)
        result.windows[kind] = series
        if series is None:
            logger.warning("No %s snapshots under %s; %s not written", kind.value, store.kind_dir(kind), filename)
            continue
        path = write_json(config.output_dir / filename, series.to_document())
        result.written.append(path)
        logger.info("Wrote %s: %d dates, %d funds", path, len(series.dates), series.fund_count)

        if config.export_csv_dir is not None:
            csv_paths = write_series_csv(series, config.export_csv_dir / kind.value)
            result.written.extend(csv_paths)
            logger.info("Exported %d %s CSV files to %s", len(csv_paths), kind.value, config.export_csv_dir / kind.value)


def _write_summaries(store: JsonSnapshotStore, config: PipelineConfig, result: BuildResult) -> None:
    for mode, filename in SUMMARY_FILES.items():
        report = assemble_report(store, SUMMARY_SOURCES[mode], mode, config.universe)
        result.reports[mode] = report
        if report is None:
            continue
        path = write_json(config.output_dir / filename, report.to_document())
        result.written.append(path)
        logger.info(
            "Wrote %s: %s vs %s (%d funds)", path, report.latest_date, report.previous_date, len(report.summaries)
        )


def run_build(config: PipelineConfig) -> BuildResult:
    store = JsonSnapshotStore(config.history_dir)
    config.output_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Building latest artifacts from %s into %s", config.history_dir, config.output_dir)

    result = BuildResult(windows={}, reports={})
    _write_windows(store, config, result)
    _write_summaries(store, config, result)

    result.metadata = build_metadata(
        result.windows.get(SnapshotKind.HOLDINGS),
        result.windows.get(SnapshotKind.SHARES),
        now=config.now,
        timezone=config.timezone,
    )
    path = write_json(config.output_dir / METADATA_FILE, result.metadata.to_document(), indent=2)
    result.written.append(path)
    logger.info("Wrote %s: date=%s updated_at=%s", path, result.metadata.date, result.metadata.updated_at_local)
    return result


def run_pipeline(args: argparse.Namespace) -> BuildResult:
    return run_build(build_config(args))
