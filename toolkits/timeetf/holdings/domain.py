"""Domain models for TIME ETF holdings snapshots and change summaries."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SnapshotDate = str
FundName = str
Row = Sequence[Any]
Measurement = int | float | None
SnapshotDocument = dict[FundName, list[Row]]


class SnapshotKind(str, Enum):
    """Independent snapshot histories sharing the same row shape."""

    HOLDINGS = "holdings"
    SHARES = "shares"


class Mode(str, Enum):
    """Measurement used when comparing two snapshots."""

    WEIGHT = "weight"
    SHARES = "shares"

    @property
    def column(self) -> int:
        """Row index holding the raw text for this mode."""
        return 2 if self is Mode.SHARES else 3


class ChangeKind(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    INCREASED = "increased"
    DECREASED = "decreased"


class DiffEntry(BaseModel):
    """Single classified instrument change between two snapshot dates."""

    model_config = ConfigDict(frozen=True)

    kind: ChangeKind
    instrument_id: str = Field(..., description="Instrument code as reported in the row.")
    instrument_name: str = Field(..., description="Display name of the instrument.")
    value: Measurement = Field(
        default=None,
        description="Measurement for added/removed entries, signed delta for increased/decreased.",
    )

    def as_row(self) -> list[Any]:
        return [self.instrument_id, self.instrument_name, self.value]


class FundSummary(BaseModel):
    """Four independently sorted change lists for one fund."""

    added: list[DiffEntry] = Field(default_factory=list)
    removed: list[DiffEntry] = Field(default_factory=list)
    increased: list[DiffEntry] = Field(default_factory=list)
    decreased: list[DiffEntry] = Field(default_factory=list)

    def entries(self) -> Iterator[DiffEntry]:
        yield from self.added
        yield from self.removed
        yield from self.increased
        yield from self.decreased

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.increased or self.decreased)

    def to_document(self) -> dict[str, list[list[Any]]]:
        return {
            ChangeKind.ADDED.value: [entry.as_row() for entry in self.added],
            ChangeKind.REMOVED.value: [entry.as_row() for entry in self.removed],
            ChangeKind.INCREASED.value: [entry.as_row() for entry in self.increased],
            ChangeKind.DECREASED.value: [entry.as_row() for entry in self.decreased],
        }


class WindowedSeries(BaseModel):
    """Retained snapshot dates merged into a fund -> date -> rows mapping."""

    dates: list[SnapshotDate] = Field(default_factory=list, description="Retained dates, newest first.")
    data: dict[FundName, dict[SnapshotDate, list[list[Any]]]] = Field(default_factory=dict)

    @property
    def latest_date(self) -> SnapshotDate | None:
        return self.dates[0] if self.dates else None

    @property
    def fund_count(self) -> int:
        return len(self.data)

    @property
    def funds(self) -> list[FundName]:
        return list(self.data)

    def to_document(self) -> dict[str, Any]:
        return {
            "dates": list(self.dates),
            "data": {
                fund: {snapshot_date: [list(row) for row in rows] for snapshot_date, rows in by_date.items()}
                for fund, by_date in self.data.items()
            },
        }


class Report(BaseModel):
    """Day-over-day change summary across all recognised funds for one mode."""

    latest_date: SnapshotDate
    previous_date: SnapshotDate
    mode: Mode
    threshold: int | float
    fund_group_a: list[FundName] = Field(default_factory=list)
    fund_group_b: list[FundName] = Field(default_factory=list)
    summaries: dict[FundName, FundSummary] = Field(default_factory=dict)

    def to_document(self) -> dict[str, Any]:
        return {
            "latestDate": self.latest_date,
            "prevDate": self.previous_date,
            "mode": self.mode.value,
            "threshold": self.threshold,
            "fundGroupA": list(self.fund_group_a),
            "fundGroupB": list(self.fund_group_b),
            "summaries": {fund: summary.to_document() for fund, summary in self.summaries.items()},
        }


class RunMetadata(BaseModel):
    """Summary of what a build produced, consumed by the display layer."""

    date: SnapshotDate | None = Field(default=None, description="Latest retained snapshot date.")
    updated_at_local: str = Field(..., description="Build time in the configured timezone.")
    fund_count: int = 0
    dates_available: list[SnapshotDate] = Field(default_factory=list)

    def to_document(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "updatedAtLocal": self.updated_at_local,
            "fundCount": self.fund_count,
            "datesAvailable": list(self.dates_available),
        }
