"""TIME ETF holdings snapshot window and change summaries."""

from .diff import count_changes, diff_rows
from .domain import (
    ChangeKind,
    DiffEntry,
    FundSummary,
    Mode,
    Report,
    RunMetadata,
    SnapshotKind,
    WindowedSeries,
)
from .extract import extract, extract_row, parse_quantity, parse_weight
from .report import assemble_report, build_metadata
from .settings import BuildSettings, FundUniverse, get_settings, load_fund_universe
from .store import (
    JsonSnapshotStore,
    SnapshotFormatError,
    SnapshotNotFoundError,
    SnapshotStore,
    write_json,
)
from .window import build_window, retention_cutoff

__all__ = [
    "BuildSettings",
    "ChangeKind",
    "DiffEntry",
    "FundSummary",
    "FundUniverse",
    "JsonSnapshotStore",
    "Mode",
    "Report",
    "RunMetadata",
    "SnapshotFormatError",
    "SnapshotKind",
    "SnapshotNotFoundError",
    "SnapshotStore",
    "WindowedSeries",
    "assemble_report",
    "build_metadata",
    "build_window",
    "count_changes",
    "diff_rows",
    "extract",
    "extract_row",
    "get_settings",
    "load_fund_universe",
    "parse_quantity",
    "parse_weight",
    "retention_cutoff",
    "write_json",
]
