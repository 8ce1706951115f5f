"""Korean-aware ordering of fund and instrument names.

Names are collated with the Unicode Collation Algorithm (``pyuca``) and
then reordered the way the CLDR ``ko`` collation does (``[reorder Hang
Hani]``): spaces, punctuation, symbols and digits first, then Hangul, then
Han ideographs, then every other script (Latin included) in DUCET order.
"""

from __future__ import annotations

import unicodedata
from functools import lru_cache

from pyuca import Collator

# Reordering groups, lowest first.
SPECIAL_GROUP = 0
HANGUL_GROUP = 1
HAN_GROUP = 2
OTHER_GROUP = 3

# Implicit weights of CJK unified ideographs (core and extension blocks).
_HAN_IMPLICIT_BASES = range(0xFB40, 0xFBC0)

_JAMO_BLOCKS = (range(0x1100, 0x1200), range(0xA960, 0xA980), range(0xD7B0, 0xD800))

NameSortKey = tuple[tuple[tuple[int, int], ...], tuple[int, ...], tuple[int, ...]]


@lru_cache(maxsize=1)
def _collator() -> Collator:
    # Loading the DUCET table is slow; share one collator per process.
    return Collator()


@lru_cache(maxsize=1)
def _script_bounds() -> tuple[int, int, int]:
    """Return ``(first_letter, hangul_low, hangul_high)`` primary weights."""
    collator = _collator()
    first_letter = collator.collation_elements("a")[0][0]
    primaries = [
        collator.collation_elements(chr(cp))[0][0]
        for block in _JAMO_BLOCKS
        for cp in block
        if unicodedata.name(chr(cp), "").startswith("HANGUL")
    ]
    return first_letter, min(primaries), max(primaries)


def _reordered_primaries(elements: list[list[int]]) -> tuple[tuple[int, int], ...]:
    first_letter, hangul_low, hangul_high = _script_bounds()
    primaries: list[tuple[int, int]] = []
    han_trail = False
    for element in elements:
        primary = element[0]
        if not primary:
            continue
        if han_trail:
            # Second half of an implicit Han weight.
            group = HAN_GROUP
            han_trail = False
        elif primary in _HAN_IMPLICIT_BASES:
            group = HAN_GROUP
            han_trail = True
        elif hangul_low <= primary <= hangul_high:
            group = HANGUL_GROUP
        elif primary < first_letter:
            group = SPECIAL_GROUP
        else:
            group = OTHER_GROUP
        primaries.append((group, primary))
    return tuple(primaries)


def name_sort_key(name: str | None) -> NameSortKey:
    """Korean-locale collation key for ``name``.

    Hangul sorts before Latin, Hangul syllables sort in dictionary order and
    Latin letters compare case-insensitively at the primary level, with case
    breaking ties at the tertiary level.
    """
    elements = _collator().collation_elements(unicodedata.normalize("NFD", name or ""))
    secondaries = tuple(element[1] for element in elements if element[1])
    tertiaries = tuple(element[2] for element in elements if element[2])
    return _reordered_primaries(elements), secondaries, tertiaries
