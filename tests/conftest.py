from __future__ import annotations

import copy
import sys
from pathlib import Path

import pytest

# Ensure the application package is importable when running tests directly via pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from toolkits.timeetf.holdings import SnapshotKind, SnapshotNotFoundError  # noqa: E402


class MemorySnapshotStore:
    """In-memory snapshot history recording every document load."""

    def __init__(self, documents: dict[SnapshotKind, dict[str, dict]] | None = None) -> None:
        self._documents = documents or {}
        self.loads: list[tuple[SnapshotKind, str]] = []

    def list_dates(self, kind: SnapshotKind) -> list[str]:
        return sorted(self._documents.get(kind, {}), reverse=True)

    def load_document(self, kind: SnapshotKind, date: str) -> dict:
        by_date = self._documents.get(kind, {})
        if date not in by_date:
            raise SnapshotNotFoundError(kind, date)
        self.loads.append((kind, date))
        return copy.deepcopy(by_date[date])


@pytest.fixture()
def memory_store():
    def _factory(holdings: dict[str, dict] | None = None, shares: dict[str, dict] | None = None):
        return MemorySnapshotStore(
            {
                SnapshotKind.HOLDINGS: holdings or {},
                SnapshotKind.SHARES: shares or {},
            }
        )

    return _factory
