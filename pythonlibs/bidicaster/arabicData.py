"""

Submodule for the Arabic presentation form tables used by the shaper.

Rather than carrying a hand-typed copy of the presentation form blocks, the tables are
read once from the compatibility decompositions the UCD gives every presentation form
(U+FE8E is "<final> 0627", U+FEFB is "<isolated> 0644 0627" and so on). The Arabic
Presentation Forms-B block is read first and wins for any letter it covers, so letters
like ALEF MAKSURA keep the classic isolated/final pair instead of picking up the
extra initial and medial forms Forms-A adds for other orthographies.

"""

from __future__ import annotations
import logging
from enum import IntEnum
from functools import lru_cache
from typing import NamedTuple
from fontTools import unicodedata

log = logging.getLogger(__name__)

LAM = 0x0644
ALEFS = frozenset({0x0622, 0x0623, 0x0625, 0x0627})
TATWEEL = 0x0640
ZWNJ = 0x200C
ZWJ = 0x200D
SPACE = 0x0020
TASHKEEL_FIRST = 0x064B
TASHKEEL_LAST = 0x0652

# Forms-B first, see above.
PRESENTATION_BLOCKS = ((0xFE70, 0xFEFF), (0xFB50, 0xFDFF))


class Form(IntEnum):
    ISOLATED = 0
    FINAL = 1
    INITIAL = 2
    MEDIAL = 3


FORM_TAGS = {
    "<isolated>": Form.ISOLATED,
    "<final>": Form.FINAL,
    "<initial>": Form.INITIAL,
    "<medial>": Form.MEDIAL,
}


class ArabicTables(NamedTuple):
    # base letter -> {Form: presentation form}
    letter_forms: dict
    # base letter -> "D", "R" or "U", judged by which forms exist
    joining: dict
    # alef variant -> {Form: lam-alef ligature}
    lam_alef: dict
    # harakah -> {Form: presentation form}, only ISOLATED and MEDIAL exist
    tashkeel: dict
    # presentation form -> the base text it came from
    unshape: dict


def is_tashkeel(codepoint: int) -> bool:
    return TASHKEEL_FIRST <= codepoint <= TASHKEEL_LAST


def _is_mark(codepoint: int) -> bool:
    return unicodedata.category(chr(codepoint)) == "Mn"


@lru_cache(maxsize=None)
def arabic_tables() -> ArabicTables:
    letter_forms = {}
    block_for_letter = {}
    lam_alef = {}
    tashkeel = {}
    unshape = {}

    for first, last in PRESENTATION_BLOCKS:
        for codepoint in range(first, last + 1):
            decomposition = unicodedata.decomposition(chr(codepoint))
            if not decomposition.startswith("<"):
                continue
            tag, *parts = decomposition.split()
            form = FORM_TAGS.get(tag)
            if form is None:
                continue
            bases = [int(part, 16) for part in parts]

            # Harakat are decomposed onto a space (isolated) or a tatweel (medial).
            if len(bases) > 1 and bases[0] in (SPACE, TATWEEL) and all(_is_mark(b) for b in bases[1:]):
                if len(bases) == 2 and is_tashkeel(bases[1]):
                    tashkeel.setdefault(bases[1], {}).setdefault(form, codepoint)
                unshape[codepoint] = "".join(chr(b) for b in bases[1:])
                continue

            unshape[codepoint] = "".join(chr(b) for b in bases)
            if len(bases) == 1:
                letter = bases[0]
                if block_for_letter.setdefault(letter, first) == first:
                    letter_forms.setdefault(letter, {}).setdefault(form, codepoint)
            elif len(bases) == 2 and bases[0] == LAM and bases[1] in ALEFS:
                lam_alef.setdefault(bases[1], {}).setdefault(form, codepoint)

    joining = {}
    for letter, forms in letter_forms.items():
        if Form.INITIAL in forms or Form.MEDIAL in forms:
            joining[letter] = "D"
        elif Form.FINAL in forms:
            joining[letter] = "R"
        else:
            joining[letter] = "U"

    log.debug("Built Arabic tables: %d letters, %d lam-alef, %d harakat, %d presentation forms",
              len(letter_forms), len(lam_alef), len(tashkeel), len(unshape))
    return ArabicTables(letter_forms, joining, lam_alef, tashkeel, unshape)


def joining_type(char: str) -> str:
    """Joining type of a character: "R", "L", "D", "C" (join causing), "T" (transparent) or "U"."""
    codepoint = ord(char)
    if codepoint == TATWEEL or codepoint == ZWJ:
        return "C"
    joining = arabic_tables().joining.get(codepoint)
    if joining is not None:
        return joining
    if codepoint != ZWNJ and unicodedata.category(char) in ("Mn", "Me", "Cf"):
        return "T"
    return "U"
