"""Diff utilities to compare two dated snapshots of one fund."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .collation import NameSortKey, name_sort_key
from .domain import ChangeKind, DiffEntry, FundSummary, Measurement, Mode, Row
from .extract import extract_row

_MAX_INDEX_KEY = 2**32 - 1


@dataclass(frozen=True)
class _IndexedRow:
    name: str
    value: Measurement


def _build_index(rows: Sequence[Row] | None, mode: Mode) -> dict[str, _IndexedRow]:
    # Repeated ids keep their first position but take the last row's values.
    index: dict[str, _IndexedRow] = {}
    for row in rows or ():
        if not row:
            continue
        name = row[1] if len(row) > 1 and row[1] is not None else ""
        index[str(row[0])] = _IndexedRow(name=str(name), value=extract_row(row, mode))
    return index


def _is_index_key(instrument_id: str) -> bool:
    if not (instrument_id.isascii() and instrument_id.isdigit()) or len(instrument_id) > 10:
        return False
    return str(int(instrument_id)) == instrument_id and int(instrument_id) < _MAX_INDEX_KEY


def _ordered_ids(index: dict[str, _IndexedRow]) -> list[str]:
    # Canonical integer ids ("373220", not "005930") lead in ascending numeric
    # order; every other id keeps its first-seen position.
    numeric = sorted((key for key in index if _is_index_key(key)), key=int)
    return numeric + [key for key in index if not _is_index_key(key)]


def _union_ids(curr_index: dict[str, _IndexedRow], prev_index: dict[str, _IndexedRow]) -> list[str]:
    """Today's ids first, then ids only present on the previous date."""
    seen = set(curr_index)
    return _ordered_ids(curr_index) + [key for key in _ordered_ids(prev_index) if key not in seen]


def _classify(
    instrument_id: str,
    current: _IndexedRow | None,
    previous: _IndexedRow | None,
    threshold: float,
) -> DiffEntry | None:
    """Classify one instrument, or return ``None`` when it did not change.

    An instrument held on both dates whose measurement is missing on either
    side produces no entry at all.
    """
    if current is not None and previous is None:
        return DiffEntry(kind=ChangeKind.ADDED, instrument_id=instrument_id,
                         instrument_name=current.name, value=current.value)
    if current is None and previous is not None:
        return DiffEntry(kind=ChangeKind.REMOVED, instrument_id=instrument_id,
                         instrument_name=previous.name, value=previous.value)
    if current is None or previous is None:
        return None
    if current.value is None or previous.value is None:
        return None

    delta = current.value - previous.value
    if delta >= threshold:
        kind = ChangeKind.INCREASED
    elif delta <= -threshold:
        kind = ChangeKind.DECREASED
    else:
        return None
    return DiffEntry(kind=kind, instrument_id=instrument_id, instrument_name=current.name, value=delta)


def diff_rows(
    current_rows: Sequence[Row] | None,
    previous_rows: Sequence[Row] | None,
    mode: Mode,
    threshold: float,
) -> FundSummary:
    """Compare a fund's rows on the latest date against the previous date.

    Args:
        current_rows: Rows on the latest date, ``None`` when the fund is absent.
        previous_rows: Rows on the previous date, ``None`` when the fund is absent.
        mode: Which measurement to compare (weight or share count).
        threshold: Minimum absolute delta, inclusive, to report a buy or sell.
    """

    curr_index = _build_index(current_rows, mode)
    prev_index = _build_index(previous_rows, mode)
    all_ids = _union_ids(curr_index, prev_index)

    buckets: dict[ChangeKind, list[DiffEntry]] = {kind: [] for kind in ChangeKind}
    for instrument_id in all_ids:
        entry = _classify(instrument_id, curr_index.get(instrument_id), prev_index.get(instrument_id), threshold)
        if entry is not None:
            buckets[entry.kind].append(entry)

    # sorted() is stable, so ties keep the union order above.
    return FundSummary(
        added=sorted(buckets[ChangeKind.ADDED], key=_name_key),
        removed=sorted(buckets[ChangeKind.REMOVED], key=_name_key),
        increased=sorted(buckets[ChangeKind.INCREASED], key=_value_key, reverse=True),
        decreased=sorted(buckets[ChangeKind.DECREASED], key=_value_key),
    )


def count_changes(summary: FundSummary) -> dict[str, int]:
    """Number of entries per change kind, keyed by the document field name."""
    return {
        ChangeKind.ADDED.value: len(summary.added),
        ChangeKind.REMOVED.value: len(summary.removed),
        ChangeKind.INCREASED.value: len(summary.increased),
        ChangeKind.DECREASED.value: len(summary.decreased),
    }


def _name_key(entry: DiffEntry) -> NameSortKey:
    return name_sort_key(entry.instrument_name)


def _value_key(entry: DiffEntry) -> float:
    return entry.value or 0
