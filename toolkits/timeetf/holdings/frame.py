"""Tabular export of a windowed series."""

from __future__ import annotations

import logging
import re
from pathlib import Path

import pandas as pd

from .domain import FundName, Mode, WindowedSeries
from .extract import extract_row

logger = logging.getLogger(__name__)

FRAME_COLUMNS = ["date", "instrument_id", "instrument_name", "quantity", "weight"]

_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|]')


def series_to_frame(series: WindowedSeries, fund: FundName) -> pd.DataFrame:
    """Flatten one fund's rows into a DataFrame, newest date first.

    ``quantity`` and ``weight`` hold parsed measurements; unparseable cells
    become ``<NA>``.
    """
    by_date = series.data.get(fund, {})
    columns: dict[str, list] = {column: [] for column in FRAME_COLUMNS}
    for snapshot_date in series.dates:
        for row in by_date.get(snapshot_date, []):
            if not row:
                continue
            columns["date"].append(snapshot_date)
            columns["instrument_id"].append(str(row[0]))
            columns["instrument_name"].append(str(row[1]) if len(row) > 1 and row[1] is not None else "")
            columns["quantity"].append(extract_row(row, Mode.SHARES))
            columns["weight"].append(extract_row(row, Mode.WEIGHT))

    df = pd.DataFrame(
        {
            "date": pd.array(columns["date"], dtype="string"),
            "instrument_id": pd.array(columns["instrument_id"], dtype="string"),
            "instrument_name": pd.array(columns["instrument_name"], dtype="string"),
            "quantity": pd.array(columns["quantity"], dtype="Int64"),
            "weight": pd.array(columns["weight"], dtype="Float64"),
        }
    )
    if df.empty:
        logger.warning("Window holds no rows for %s", fund)
    return df


def fund_filename(fund: FundName) -> str:
    return _UNSAFE_FILENAME_RE.sub("_", fund).strip() or "fund"


def write_series_csv(series: WindowedSeries, folder: str | Path) -> list[Path]:
    """Persist every fund in ``series`` as ``<folder>/<fund>.csv``."""
    target = Path(folder)
    target.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for fund in series.funds:
        df = series_to_frame(series, fund)
        path = target / f"{fund_filename(fund)}.csv"
        df.to_csv(path, index=False)
        logger.debug("Wrote series csv: %s (rows=%d)", path, len(df))
        written.append(path)
    return written
