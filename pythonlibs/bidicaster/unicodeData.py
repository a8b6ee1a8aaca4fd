"""

Submodule for the immutable Unicode tables bidicaster runs on.

The bidi category table is built once per process from the Unicode Character Database
that fontTools exposes (which is unicodedata2 when installed, so it tracks the newest
Unicode release rather than the interpreter's). It's stored as sorted, disjoint
(start, end, category) ranges covering the whole code space, and looked up with a
binary search. Mirrored glyphs come from the BidiMirroring.txt copy fontTools ships.
Bracket pairs aren't part of the UCD that unicodedata exposes, so those are embedded
here from BidiBrackets.txt.

"""

from __future__ import annotations
import logging
from bisect import bisect_right
from functools import lru_cache
from time import perf_counter
from typing import NamedTuple
from fontTools import unicodedata

from bidicaster.categories import BidiCategory, BracketType

log = logging.getLogger(__name__)

MAX_CODEPOINT = 0x10FFFF

# Planes that actually carry assigned characters worth asking the UCD about.
# Everything else is either unassigned (L) or private use (L), apart from noncharacters.
SCANNED_PLANES = (0, 1, 2, 3, 14)

# Defaults for unassigned code points, from the @missing lines of DerivedBidiClass.txt.
# Anything not covered here (and not a noncharacter) defaults to L.
UNASSIGNED_DEFAULTS = (
    (0x0590, 0x05FF, BidiCategory.R),
    (0x0600, 0x07BF, BidiCategory.AL),
    (0x07C0, 0x085F, BidiCategory.R),
    (0x0860, 0x08FF, BidiCategory.AL),
    (0x20A0, 0x20CF, BidiCategory.ET),
    (0xFB1D, 0xFB4F, BidiCategory.R),
    (0xFB50, 0xFDCF, BidiCategory.AL),
    (0xFDF0, 0xFDFF, BidiCategory.AL),
    (0xFE70, 0xFEFF, BidiCategory.AL),
    (0x10800, 0x10CFF, BidiCategory.R),
    (0x10D00, 0x10D3F, BidiCategory.AL),
    (0x10D40, 0x10EBF, BidiCategory.R),
    (0x10EC0, 0x10EFF, BidiCategory.AL),
    (0x10F00, 0x10F2F, BidiCategory.R),
    (0x10F30, 0x10F6F, BidiCategory.AL),
    (0x10F70, 0x10FFF, BidiCategory.R),
    (0x1E800, 0x1EC6F, BidiCategory.R),
    (0x1EC70, 0x1ECBF, BidiCategory.AL),
    (0x1ECC0, 0x1ECFF, BidiCategory.R),
    (0x1ED00, 0x1ED4F, BidiCategory.AL),
    (0x1ED50, 0x1EDFF, BidiCategory.R),
    (0x1EE00, 0x1EEFF, BidiCategory.AL),
    (0x1EF00, 0x1EFFF, BidiCategory.R),
    # Default ignorables
    (0x2060, 0x206F, BidiCategory.BN),
    (0xFFF0, 0xFFF8, BidiCategory.BN),
    (0xE0000, 0xE0FFF, BidiCategory.BN),
)


_CATEGORY_BY_NAME = {category.value: category for category in BidiCategory}


class CategoryTable(NamedTuple):
    starts: tuple
    ranges: tuple


def is_noncharacter(codepoint: int) -> bool:
    return 0xFDD0 <= codepoint <= 0xFDEF or (codepoint & 0xFFFE) == 0xFFFE


def default_category(codepoint: int) -> BidiCategory:
    """The category an unassigned code point falls back to."""
    if is_noncharacter(codepoint):
        return BidiCategory.BN
    for start, end, category in UNASSIGNED_DEFAULTS:
        if start <= codepoint <= end:
            return category
    return BidiCategory.L


def ucd_category(codepoint: int) -> BidiCategory:
    """Ask the UCD for the bidi class of a single code point.

    Surrogates can't be valid characters on their own, so they're treated as
    boundary neutrals and ignored by the algorithm.
    """
    if 0xD800 <= codepoint <= 0xDFFF:
        return BidiCategory.BN
    name = unicodedata.bidirectional(chr(codepoint))
    if name:
        return _CATEGORY_BY_NAME[name]
    return default_category(codepoint)


def _append_range(ranges: list, start: int, end: int, category: BidiCategory):
    if ranges and ranges[-1][2] is category and ranges[-1][1] == start - 1:
        ranges[-1] = (ranges[-1][0], end, category)
    else:
        ranges.append((start, end, category))


@lru_cache(maxsize=None)
def category_table() -> CategoryTable:
    """Build (once) the sorted range table for every code point from U+0000 to U+10FFFF."""
    began = perf_counter()
    ranges = []
    for plane in range(17):
        plane_start = plane << 16
        if plane in SCANNED_PLANES:
            for codepoint in range(plane_start, plane_start + 0x10000):
                _append_range(ranges, codepoint, codepoint, ucd_category(codepoint))
        else:
            _append_range(ranges, plane_start, plane_start + 0xFFFD, BidiCategory.L)
            _append_range(ranges, plane_start + 0xFFFE, plane_start + 0xFFFF, BidiCategory.BN)
    ranges = tuple(ranges)
    log.debug("Built bidi category table: %d ranges in %.3fs (Unicode %s)",
              len(ranges), perf_counter() - began, unicodedata.unidata_version)
    return CategoryTable(tuple(r[0] for r in ranges), ranges)


def lookup_category(codepoint: int) -> BidiCategory:
    if not 0 <= codepoint <= MAX_CODEPOINT:
        return BidiCategory.BN
    table = category_table()
    return table.ranges[bisect_right(table.starts, codepoint) - 1][2]


# --------------------------------------------------------------------------------------------------------------------------------

# Brackets and mirroring

# --------------------------------------------------------------------------------------------------------------------------------

# (opening, closing) pairs from BidiBrackets.txt.
_BRACKET_PAIRS = (
    (0x0028, 0x0029), (0x005B, 0x005D), (0x007B, 0x007D),
    (0x0F3A, 0x0F3B), (0x0F3C, 0x0F3D), (0x169B, 0x169C),
    (0x2045, 0x2046), (0x207D, 0x207E), (0x208D, 0x208E),
    (0x2308, 0x2309), (0x230A, 0x230B), (0x2329, 0x232A),
    (0x27C5, 0x27C6), (0x29D8, 0x29D9), (0x29DA, 0x29DB), (0x29FC, 0x29FD),
    (0x298D, 0x2990), (0x298F, 0x298E),
    (0xFF08, 0xFF09), (0xFF3B, 0xFF3D), (0xFF5B, 0xFF5D), (0xFF5F, 0xFF60), (0xFF62, 0xFF63),
)
# Blocks where brackets simply alternate opening, closing, opening, closing...
_BRACKET_RUNS = (
    (0x2768, 0x2775), (0x27E6, 0x27EF), (0x2983, 0x298C), (0x2991, 0x2998), (0x2E22, 0x2E29),
    (0x2E55, 0x2E5C), (0x3008, 0x3011), (0x3014, 0x301B), (0xFE59, 0xFE5E),
)


class BracketInfo(NamedTuple):
    paired: int
    type: BracketType
    # Shared by both halves of a pair and by canonically equivalent brackets.
    identity: int


def _bracket_pairs():
    yield from _BRACKET_PAIRS
    for start, end in _BRACKET_RUNS:
        for opening in range(start, end, 2):
            yield opening, opening + 1


def canonical_singleton(codepoint: int) -> int:
    """Follow a canonical singleton decomposition (e.g. U+2329 -> U+3008), if there is one."""
    decomposition = unicodedata.decomposition(chr(codepoint))
    if decomposition and not decomposition.startswith("<") and " " not in decomposition:
        return int(decomposition, 16)
    return codepoint


@lru_cache(maxsize=None)
def bracket_table() -> dict:
    table = {}
    for opening, closing in _bracket_pairs():
        identity = canonical_singleton(opening)
        table[opening] = BracketInfo(closing, BracketType.OPENING, identity)
        table[closing] = BracketInfo(opening, BracketType.CLOSING, identity)
    return table


def mirrored_codepoint(codepoint: int) -> int | None:
    """Bidi_Mirroring_Glyph of a code point from BidiMirroring.txt, or None when it has none.
    fontTools ships that file as fontTools.unicodedata.Mirrored, keyed by integer code point.
    """
    return unicodedata.mirrored(codepoint)
