"""Merge the retained snapshot history into one fund-keyed time series."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from .domain import FundName, Row, SnapshotDate, SnapshotKind, WindowedSeries
from .store import SnapshotStore

logger = logging.getLogger(__name__)


def _as_date(now: date | datetime) -> date:
    if isinstance(now, datetime):
        return now.date()
    return now


def retention_cutoff(now: date | datetime, retention_days: int) -> SnapshotDate:
    """Oldest snapshot date kept when looking back ``retention_days`` from ``now``."""
    if retention_days < 0:
        raise ValueError("retention_days must be >= 0")
    return (_as_date(now) - timedelta(days=retention_days)).isoformat()


def build_window(
    store: SnapshotStore,
    kind: SnapshotKind,
    retention_days: int,
    now: date | datetime,
) -> WindowedSeries | None:
    """Collect every snapshot on or after the retention cutoff.

    Returns ``None`` when the store holds no dates for ``kind``. Funds missing
    from a date are left out of that date rather than filled with an empty list.
    """
    dates = store.list_dates(kind)
    if not dates:
        logger.info("No %s snapshots available; skipping window build", kind.value)
        return None

    cutoff = retention_cutoff(now, retention_days)
    retained = [snapshot_date for snapshot_date in dates if snapshot_date >= cutoff]
    if not retained:
        logger.warning("All %d %s snapshots are older than %s", len(dates), kind.value, cutoff)

    data: dict[FundName, dict[SnapshotDate, list[Row]]] = {}
    for snapshot_date in retained:
        document = store.load_document(kind, snapshot_date)
        for fund, rows in document.items():
            data.setdefault(fund, {})[snapshot_date] = rows

    logger.debug(
        "Built %s window: %d of %d dates retained (cutoff %s), %d funds",
        kind.value,
        len(retained),
        len(dates),
        cutoff,
        len(data),
    )
    return WindowedSeries(dates=retained, data=data)
