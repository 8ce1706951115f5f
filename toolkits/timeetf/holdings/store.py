"""Read and write dated snapshot documents stored as JSON files."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from .domain import SnapshotDate, SnapshotDocument, SnapshotKind

logger = logging.getLogger(__name__)

_DATE_STEM_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class SnapshotNotFoundError(LookupError):
    """Requested snapshot date is not present in the store."""

    def __init__(self, kind: SnapshotKind, date: SnapshotDate) -> None:
        super().__init__(f"No {kind.value} snapshot stored for {date}")
        self.kind = kind
        self.date = date


class SnapshotFormatError(ValueError):
    """Stored snapshot document could not be decoded."""

    def __init__(self, kind: SnapshotKind, date: SnapshotDate, reason: str) -> None:
        super().__init__(f"Malformed {kind.value} snapshot {date}: {reason}")
        self.kind = kind
        self.date = date


class SnapshotStore(Protocol):
    """Read access to the append-only snapshot history."""

    def list_dates(self, kind: SnapshotKind) -> list[SnapshotDate]:
        """Return available dates for ``kind``, newest first."""

    def load_document(self, kind: SnapshotKind, date: SnapshotDate) -> SnapshotDocument:
        """Return the fund -> rows mapping stored for ``date``."""


class JsonSnapshotStore:
    """Snapshot history laid out as ``<root>/<kind>/<YYYY-MM-DD>.json``."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def kind_dir(self, kind: SnapshotKind) -> Path:
        return self._root / kind.value

    def document_path(self, kind: SnapshotKind, date: SnapshotDate) -> Path:
        return self.kind_dir(kind) / f"{date}.json"

    def list_dates(self, kind: SnapshotKind) -> list[SnapshotDate]:
        folder = self.kind_dir(kind)
        if not folder.exists():
            return []
        dates: list[SnapshotDate] = []
        for path in folder.glob("*.json"):
            if not _DATE_STEM_RE.fullmatch(path.stem):
                logger.debug("Ignoring non-dated file in %s: %s", folder, path.name)
                continue
            dates.append(path.stem)
        return sorted(dates, reverse=True)

    def load_document(self, kind: SnapshotKind, date: SnapshotDate) -> SnapshotDocument:
        path = self.document_path(kind, date)
        if not _DATE_STEM_RE.fullmatch(date) or not path.is_file():
            raise SnapshotNotFoundError(kind, date)
        logger.debug("Loading %s snapshot: %s", kind.value, path)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise SnapshotFormatError(kind, date, str(exc)) from exc
        if not isinstance(payload, dict):
            raise SnapshotFormatError(kind, date, "document must be a JSON object")
        for fund, rows in payload.items():
            if not isinstance(rows, list):
                raise SnapshotFormatError(kind, date, f"rows for {fund!r} must be a list")
        return payload

    def write_document(
        self, kind: SnapshotKind, date: SnapshotDate, document: Mapping[str, list[Any]]
    ) -> Path:
        """Persist a snapshot document, replacing any existing one for ``date``."""
        if not _DATE_STEM_RE.fullmatch(date):
            raise ValueError(f"Snapshot date must be YYYY-MM-DD: {date!r}")
        path = self.document_path(kind, date)
        write_json(path, dict(document), indent=2)
        logger.debug("Wrote %s snapshot: %s (funds=%d)", kind.value, path, len(document))
        return path


def write_json(path: str | Path, payload: Any, *, indent: int | None = None) -> Path:
    """Write ``payload`` as UTF-8 JSON, creating parent directories."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    separators = None if indent is not None else (",", ":")
    target.write_text(
        json.dumps(payload, ensure_ascii=False, indent=indent, separators=separators),
        encoding="utf-8",
    )
    return target
