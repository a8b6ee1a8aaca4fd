"""

Submodule for looking up per-character bidi information: the bidirectional category,
bracket pairing and mirrored glyphs. Every function here accepts either an integer
code point or a single-character string.

"""

from __future__ import annotations
from bidicaster.categories import BidiCategory, BidiInputError, BracketType
from bidicaster.unicodeData import bracket_table, lookup_category, mirrored_codepoint


def _codepoint(char) -> int:
    if isinstance(char, str):
        if len(char) != 1:
            raise BidiInputError(f"Expected a single character, got {char!r}")
        return ord(char)
    if isinstance(char, int) and not isinstance(char, bool):
        return char
    raise BidiInputError(f"Expected a code point or a single character, got {type(char).__name__}")


def get_category(char) -> BidiCategory:
    """Get the bidirectional category of a character.

    Code points the Unicode data doesn't assign fall back to the block default
    (R, AL or ET for the blocks reserved for those), noncharacters and lone surrogates
    are BN, and everything else defaults to L.

    Args:
        char (int | str): Code point or single character.

    Returns:
        BidiCategory: The original (unresolved) bidi class.
    """
    return lookup_category(_codepoint(char))


def get_bracket_type(char) -> BracketType:
    info = bracket_table().get(_codepoint(char))
    return info.type if info else BracketType.NONE


def get_paired_bracket(char) -> int:
    """Returns the code point of the other half of a bracket pair, or the code point itself for non-brackets."""
    codepoint = _codepoint(char)
    info = bracket_table().get(codepoint)
    return info.paired if info else codepoint


def get_bracket_identity(char) -> int:
    """A value shared by both halves of a bracket pair, and by canonically equivalent brackets
    (so U+2329 pairs with U+3009 as well as U+232A). Non-brackets get their own code point.
    """
    codepoint = _codepoint(char)
    info = bracket_table().get(codepoint)
    return info.identity if info else codepoint


def get_mirror(char) -> int | None:
    """The code point that replaces char when it's shown right-to-left (rule L4), or None."""
    return mirrored_codepoint(_codepoint(char))
