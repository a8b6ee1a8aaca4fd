"""

Submodule holding the enumerations shared across bidicaster: bidirectional categories,
bracket types and paragraph directions, plus the category groupings the resolution rules
are written against.

"""

from __future__ import annotations
from enum import Enum, IntEnum


class BidiInputError(ValueError):
    """Raised before any processing when a caller hands bidicaster something it can't work with."""
    pass


class BidiCategory(str, Enum):
    """The Unicode bidirectional classes. Values are the UCD short aliases,
    so BidiCategory("AL") and fontTools.unicodedata.bidirectional() line up directly.
    """
    # Strong
    L = "L"
    R = "R"
    AL = "AL"
    # Weak
    EN = "EN"
    ES = "ES"
    ET = "ET"
    AN = "AN"
    CS = "CS"
    NSM = "NSM"
    BN = "BN"
    # Neutral
    B = "B"
    S = "S"
    WS = "WS"
    ON = "ON"
    # Explicit formatting
    LRE = "LRE"
    LRO = "LRO"
    RLE = "RLE"
    RLO = "RLO"
    PDF = "PDF"
    # Isolate formatting
    LRI = "LRI"
    RLI = "RLI"
    FSI = "FSI"
    PDI = "PDI"

    def __str__(self):
        return self.value


class BracketType(Enum):
    NONE = 0
    OPENING = 1
    CLOSING = 2


class ParagraphDirection(IntEnum):
    """Requested paragraph direction. The integer values match the direction
    codes used by the BidiCharacterTest.txt conformance file.
    """
    LTR = 0
    RTL = 1
    AUTO = 2

    @classmethod
    def coerce(cls, value) -> ParagraphDirection:
        """Accept a ParagraphDirection, one of the ints 0/1/2, or one of the strings
        "ltr", "rtl", "auto" (any case).

        Raises:
            BidiInputError: The value doesn't name a direction.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise BidiInputError(f"Unknown paragraph direction {value!r}") from None
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise BidiInputError(f"Unknown paragraph direction {value!r}") from None
        raise BidiInputError(f"Unknown paragraph direction {value!r}")


STRONG_TYPES = frozenset({BidiCategory.L, BidiCategory.R, BidiCategory.AL})
ISOLATE_INITIATORS = frozenset({BidiCategory.LRI, BidiCategory.RLI, BidiCategory.FSI})
ISOLATE_CONTROLS = ISOLATE_INITIATORS | {BidiCategory.PDI}
EMBEDDING_INITIATORS = frozenset({BidiCategory.LRE, BidiCategory.RLE, BidiCategory.LRO, BidiCategory.RLO})
# Characters taken out of level-run building by rule X9.
REMOVED_BY_X9 = EMBEDDING_INITIATORS | {BidiCategory.PDF, BidiCategory.BN}
# "Neutral or isolate" for rules N1 and N2.
NEUTRAL_TYPES = frozenset({BidiCategory.B, BidiCategory.S, BidiCategory.WS, BidiCategory.ON}) | ISOLATE_CONTROLS
# Reset to the paragraph level by L1 when trailing a separator or the end of a line.
TRAILING_WHITESPACE_TYPES = REMOVED_BY_X9 | ISOLATE_CONTROLS | {BidiCategory.WS}
NUMBER_TYPES = frozenset({BidiCategory.EN, BidiCategory.AN})
