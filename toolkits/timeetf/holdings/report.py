"""Assemble per-fund change summaries and run metadata."""

from __future__ import annotations

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from .diff import count_changes, diff_rows
from .domain import FundSummary, Mode, Report, RunMetadata, SnapshotKind, WindowedSeries
from .settings import FundUniverse
from .store import SnapshotStore

logger = logging.getLogger(__name__)

UPDATED_AT_FORMAT = "%Y-%m-%d %H:%M"


def assemble_report(
    store: SnapshotStore,
    kind: SnapshotKind,
    mode: Mode,
    universe: FundUniverse,
    *,
    threshold: int | float | None = None,
) -> Report | None:
    """Compare the two most recent snapshots of ``kind`` for every recognised fund.

    Returns ``None`` when fewer than two dates are stored. Funds missing from
    the latest snapshot get no summary entry; funds missing only from the
    previous snapshot report every holding as added.
    """
    dates = store.list_dates(kind)
    if len(dates) < 2:
        logger.warning(
            "%s summary skipped: insufficient history (%d date(s) for %s)", mode.value, len(dates), kind.value
        )
        return None

    latest_date, previous_date = dates[0], dates[1]
    if threshold is None:
        threshold = universe.threshold_for(mode)

    latest = store.load_document(kind, latest_date)
    previous = store.load_document(kind, previous_date)

    summaries: dict[str, FundSummary] = {}
    for fund in universe.funds:
        current_rows = latest.get(fund)
        if current_rows is None:
            logger.debug("%s absent from %s %s; no summary", fund, kind.value, latest_date)
            continue
        summary = diff_rows(current_rows, previous.get(fund), mode, threshold)
        logger.debug("%s [%s] %s", fund, mode.value, count_changes(summary))
        summaries[fund] = summary

    return Report(
        latest_date=latest_date,
        previous_date=previous_date,
        mode=mode,
        threshold=threshold,
        fund_group_a=list(universe.fund_group_a),
        fund_group_b=list(universe.fund_group_b),
        summaries=summaries,
    )


def build_metadata(
    holdings: WindowedSeries | None,
    shares: WindowedSeries | None,
    *,
    now: datetime,
    timezone: str,
) -> RunMetadata:
    """Describe a build: latest retained date, fund count and available dates."""
    latest_date = None
    if holdings is not None and holdings.latest_date:
        latest_date = holdings.latest_date
    elif shares is not None and shares.latest_date:
        latest_date = shares.latest_date

    local_now = now.astimezone(ZoneInfo(timezone))
    return RunMetadata(
        date=latest_date,
        updated_at_local=local_now.strftime(UPDATED_AT_FORMAT),
        fund_count=holdings.fund_count if holdings is not None else 0,
        dates_available=list(holdings.dates) if holdings is not None else [],
    )
