"""

Submodule for paired bracket resolution (rules BD14-BD16 and N0).

Brackets are only paired inside one isolating run sequence, and only while they're still
neutral (ON) at that point, so a bracket caught by a directional override never pairs.
Matching uses the bracket identity from the classifier, which treats canonically
equivalent brackets (U+2329 and U+3008 for example) as the same bracket.

"""

from __future__ import annotations
import logging

from bidicaster.categories import BidiCategory as C, BracketType

log = logging.getLogger(__name__)

# BD16 stack size. Running out of room stops pairing for the rest of the sequence.
MAX_BRACKET_STACK = 63


def locate_bracket_pairs(chars: list) -> list:
    """BD16: identify bracket pairs among a sequence's characters.

    Args:
        chars (list[BidiChar]): Characters of one isolating run sequence, in order.

    Returns:
        list[tuple[int,int]]: (opening, closing) positions within chars, sorted by the opening position.
    """
    openers = []
    pairs = []
    for position, char in enumerate(chars):
        if char.bracket is BracketType.NONE or char.type is not C.ON:
            continue
        if char.bracket is BracketType.OPENING:
            if len(openers) == MAX_BRACKET_STACK:
                log.debug("Bracket stack full at position %d, no further pairing in this sequence", position)
                break
            openers.append((char.pair, position))
            continue
        for depth in range(len(openers) - 1, -1, -1):
            if openers[depth][0] == char.pair:
                pairs.append((openers[depth][1], position))
                del openers[depth:]
                break
    pairs.sort()
    return pairs


def _strong_direction(category: C) -> C | None:
    # Inside N0, numbers count as R.
    if category is C.L:
        return C.L
    if category in (C.R, C.AL, C.EN, C.AN):
        return C.R
    return None


def _classify_pair_content(chars: list, opening: int, closing: int, embedding: C) -> C | None:
    opposite = None
    for char in chars[opening + 1:closing]:
        direction = _strong_direction(char.type)
        if direction is None:
            continue
        if direction is embedding:
            return direction
        opposite = direction
    return opposite


def _preceding_strong(chars: list, opening: int, sos: C) -> C:
    for char in reversed(chars[:opening]):
        direction = _strong_direction(char.type)
        if direction is not None:
            return direction
    return sos


def _set_bracket_type(chars: list, position: int, direction: C):
    chars[position].type = direction
    # Marks that originally followed the bracket go along with it.
    for char in chars[position + 1:]:
        if char.orig is not C.NSM:
            break
        char.type = direction


def resolve_bracket_pairs(sequence):
    """N0: give both brackets of each pair a strong direction based on what they enclose
    and, when that's only the opposite direction, on what comes before them.
    Pairs are processed in order of their opening bracket, and each resolved pair
    counts as strong context for the pairs after it.
    """
    chars = sequence.chars
    embedding = sequence.embedding_direction
    for opening, closing in locate_bracket_pairs(chars):
        direction = _classify_pair_content(chars, opening, closing, embedding)
        if direction is None:
            continue
        if direction is not embedding and _preceding_strong(chars, opening, sequence.sos) is not direction:
            direction = embedding
        _set_bracket_type(chars, opening, direction)
        _set_bracket_type(chars, closing, direction)
