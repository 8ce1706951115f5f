"""Parse raw snapshot cells into numeric measurements."""

from __future__ import annotations

import math
import re
from typing import Any

from .domain import Measurement, Mode, Row

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _as_text(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, str)):
        return str(value)
    return None


def parse_quantity(value: Any) -> int | None:
    """Parse a share count such as ``"1,234"``; ``None`` when not an integer."""
    text = _as_text(value)
    if text is None:
        return None
    cleaned = text.replace(",", "").strip()
    if not _INTEGER_RE.fullmatch(cleaned):
        return None
    try:
        return int(cleaned)
    except ValueError:  # exceeds the interpreter's digit limit
        return None


def parse_weight(value: Any) -> float | None:
    """Parse a portfolio weight such as ``"5.23"``; ``None`` when not a finite decimal."""
    text = _as_text(value)
    if text is None:
        return None
    cleaned = text.strip()
    if not _DECIMAL_RE.fullmatch(cleaned):
        return None
    number = float(cleaned)
    if not math.isfinite(number):
        return None
    return number


def extract(value: Any, mode: Mode) -> Measurement:
    """Return the measurement for ``mode`` or ``None`` when it is missing.

    Zero is a valid measurement and is returned as ``0``/``0.0``.
    """
    if mode is Mode.SHARES:
        return parse_quantity(value)
    return parse_weight(value)


def extract_row(row: Row, mode: Mode) -> Measurement:
    """Extract the measurement stored in the mode's column of ``row``."""
    if len(row) <= mode.column:
        return None
    return extract(row[mode.column], mode)
