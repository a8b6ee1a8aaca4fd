"""

Submodule for resolving embedding levels for a single paragraph, following the
Unicode Bidirectional Algorithm from paragraph level detection through implicit levels.
For more info: https://unicode.org/reports/tr9/#Resolving_Embedding_Levels

The stages are kept as separate functions working on a shared BidiStorage so they can be
run (and inspected) one at a time, in the same order as the rules:

    storage = get_embedding_levels(text, ParagraphDirection.AUTO)
    explicit_embed_and_overrides(storage)
    build_isolating_run_sequences(storage)
    resolve_weak_types(storage)
    resolve_neutral_types(storage)
    resolve_implicit_levels(storage)

resolve_paragraph() does all of the above in one go. Nothing here is shared between calls,
every call builds its own storage.

"""

from __future__ import annotations
import logging
from typing import NamedTuple

from bidicaster.brackets import resolve_bracket_pairs
from bidicaster.categories import (
    BidiCategory as C, BracketType, ParagraphDirection,
    EMBEDDING_INITIATORS, ISOLATE_CONTROLS, ISOLATE_INITIATORS,
    NEUTRAL_TYPES, NUMBER_TYPES, REMOVED_BY_X9,
)
from bidicaster.classifier import get_bracket_identity, get_bracket_type, get_category

log = logging.getLogger(__name__)

MAX_DEPTH = 125


class BidiChar:
    """Working record for one character of a paragraph. orig never changes,
    type is rewritten by each rule pass."""
    __slots__ = ("index", "ch", "orig", "type", "level", "bracket", "pair")

    def __init__(self, index: int, ch: str):
        self.index = index
        self.ch = ch
        self.orig = get_category(ch)
        self.type = self.orig
        self.level = 0
        self.bracket = BracketType.NONE
        self.pair = 0
        if self.orig is C.ON:
            self.bracket = get_bracket_type(ch)
            if self.bracket is not BracketType.NONE:
                self.pair = get_bracket_identity(ch)

    @property
    def removed(self) -> bool:
        """True for the characters rule X9 takes out of level resolution."""
        return self.orig in REMOVED_BY_X9

    def __repr__(self):
        return f"BidiChar({self.ch!r}, orig={self.orig}, type={self.type}, level={self.level})"


class StatusEntry(NamedTuple):
    level: int
    # None for neutral, otherwise BidiCategory.L or BidiCategory.R
    override: C | None
    isolate: bool


class BidiStorage:
    def __init__(self, text: str = ""):
        self.text = text
        self.base_level = 0
        self.chars = []
        # Index of the matching PDI for each isolate initiator (len(chars) when there's none),
        # and of the matching initiator for each PDI (-1 when there's none).
        self.matching_pdi = []
        self.matching_initiator = []
        self.sequences = []

    @property
    def levels(self) -> list:
        return [char.level for char in self.chars]

    @property
    def orig_types(self) -> list:
        return [char.orig for char in self.chars]

    @property
    def types(self) -> list:
        return [char.type for char in self.chars]


def _type_for_level(level: int) -> C:
    return C.R if level & 1 else C.L


class IsolatingRunSequence:
    """A set of level runs linked through matching isolate initiators and PDIs (BD13).
    The weak and neutral rules only ever look inside one of these.
    """

    def __init__(self, storage: BidiStorage, positions: list):
        chars = storage.chars
        self.positions = positions
        self.chars = [chars[i] for i in positions]
        self.level = self.chars[0].level

        previous = positions[0] - 1
        while previous >= 0 and chars[previous].removed:
            previous -= 1
        previous_level = chars[previous].level if previous >= 0 else storage.base_level
        self.sos = _type_for_level(max(previous_level, self.level))

        last = positions[-1]
        if chars[last].orig in ISOLATE_INITIATORS:
            following_level = storage.base_level
        else:
            following = last + 1
            while following < len(chars) and chars[following].removed:
                following += 1
            following_level = chars[following].level if following < len(chars) else storage.base_level
        self.eos = _type_for_level(max(following_level, self.level))

    @property
    def embedding_direction(self) -> C:
        return _type_for_level(self.level)

    def __len__(self):
        return len(self.chars)

    def __repr__(self):
        return f"IsolatingRunSequence(level={self.level}, sos={self.sos}, eos={self.eos}, positions={self.positions})"


# --------------------------------------------------------------------------------------------------------------------------------

# Paragraph level and explicit levels

# --------------------------------------------------------------------------------------------------------------------------------

def match_isolates(storage: BidiStorage):
    """BD9: pair every isolate initiator with its PDI."""
    length = len(storage.chars)
    storage.matching_pdi = [-1] * length
    storage.matching_initiator = [-1] * length
    openers = []
    for i, char in enumerate(storage.chars):
        if char.orig in ISOLATE_INITIATORS:
            openers.append(i)
        elif char.orig is C.PDI and openers:
            opener = openers.pop()
            storage.matching_pdi[opener] = i
            storage.matching_initiator[i] = opener
    for opener in openers:
        storage.matching_pdi[opener] = length


def first_strong_level(storage: BidiStorage, start: int = 0, end: int | None = None) -> int | None:
    """P2/P3: find the first L, R or AL between start and end, skipping over isolates.

    Returns:
        int | None: 0 for L, 1 for R or AL, None if there's no strong character.
    """
    chars = storage.chars
    end = len(chars) if end is None else end
    i = start
    while i < end:
        orig = chars[i].orig
        if orig is C.L:
            return 0
        if orig is C.R or orig is C.AL:
            return 1
        if orig in ISOLATE_INITIATORS:
            i = storage.matching_pdi[i]
        i += 1
    return None


def get_base_level(storage: BidiStorage, direction: ParagraphDirection = ParagraphDirection.AUTO) -> int:
    if direction is ParagraphDirection.LTR:
        return 0
    if direction is ParagraphDirection.RTL:
        return 1
    level = first_strong_level(storage)
    return 0 if level is None else level


def get_embedding_levels(text: str, direction: ParagraphDirection = ParagraphDirection.AUTO) -> BidiStorage:
    """Classify every character of a paragraph and settle its base level.

    Args:
        text (str): A single paragraph. Any paragraph separator should only appear at the very end.
        direction (ParagraphDirection, optional): Requested direction. Defaults to AUTO.

    Returns:
        BidiStorage: Fresh storage with every character at the paragraph level.
    """
    storage = BidiStorage(text)
    storage.chars = [BidiChar(i, ch) for i, ch in enumerate(text)]
    match_isolates(storage)
    storage.base_level = get_base_level(storage, direction)
    for char in storage.chars:
        char.level = storage.base_level
    return storage


def explicit_embed_and_overrides(storage: BidiStorage):
    """X1-X8: walk the paragraph with the directional status stack, assigning explicit levels
    and applying overrides. Anything nested deeper than MAX_DEPTH is counted rather than pushed.
    """
    stack = [StatusEntry(storage.base_level, None, False)]
    overflow_isolates = 0
    overflow_embeddings = 0
    valid_isolates = 0

    for i, char in enumerate(storage.chars):
        orig = char.orig
        if orig in EMBEDDING_INITIATORS or orig in ISOLATE_INITIATORS:
            is_isolate = orig in ISOLATE_INITIATORS
            if orig is C.FSI:
                is_rtl = first_strong_level(storage, i + 1, storage.matching_pdi[i]) == 1
            else:
                is_rtl = orig in (C.RLE, C.RLO, C.RLI)

            top = stack[-1]
            if is_isolate:
                # X5a-X5c: the initiator itself sits outside the isolate it opens.
                char.level = top.level
                if top.override is not None:
                    char.type = top.override

            new_level = (top.level + 1) | 1 if is_rtl else (top.level + 2) & ~1
            if new_level <= MAX_DEPTH and overflow_isolates == 0 and overflow_embeddings == 0:
                if is_isolate:
                    valid_isolates += 1
                override = C.R if orig is C.RLO else C.L if orig is C.LRO else None
                stack.append(StatusEntry(new_level, override, is_isolate))
                if not is_isolate:
                    char.level = new_level
            else:
                if is_isolate:
                    overflow_isolates += 1
                elif overflow_isolates == 0:
                    overflow_embeddings += 1
                log.debug("Directional status stack overflow at index %d (%s)", i, orig)

        elif orig is C.PDI:
            if overflow_isolates > 0:
                overflow_isolates -= 1
            elif valid_isolates > 0:
                overflow_embeddings = 0
                while not stack[-1].isolate:
                    stack.pop()
                stack.pop()
                valid_isolates -= 1
            top = stack[-1]
            char.level = top.level
            if top.override is not None:
                char.type = top.override

        elif orig is C.PDF:
            if overflow_isolates > 0:
                pass
            elif overflow_embeddings > 0:
                overflow_embeddings -= 1
            elif not stack[-1].isolate and len(stack) >= 2:
                stack.pop()
            char.level = stack[-1].level

        elif orig is C.B:
            # X8
            char.level = storage.base_level

        elif orig is C.BN:
            char.level = stack[-1].level

        else:
            top = stack[-1]
            char.level = top.level
            if top.override is not None:
                char.type = top.override


def build_isolating_run_sequences(storage: BidiStorage) -> list:
    """X9 and X10: split the non-removed characters into level runs and chain them into isolating run sequences."""
    chars = storage.chars
    runs = []
    run_for_position = {}
    current_level = None
    for i, char in enumerate(chars):
        if char.removed:
            continue
        if not runs or char.level != current_level:
            runs.append([])
            current_level = char.level
        runs[-1].append(i)
        run_for_position[i] = len(runs) - 1

    sequences = []
    for run in runs:
        first = run[0]
        if chars[first].orig is C.PDI and storage.matching_initiator[first] != -1:
            # Continues the sequence its initiator started.
            continue
        positions = list(run)
        while True:
            last = positions[-1]
            if chars[last].orig in ISOLATE_INITIATORS and storage.matching_pdi[last] != len(chars):
                positions.extend(runs[run_for_position[storage.matching_pdi[last]]])
            else:
                break
        sequences.append(IsolatingRunSequence(storage, positions))

    storage.sequences = sequences
    return sequences


# --------------------------------------------------------------------------------------------------------------------------------

# Weak, neutral and implicit resolution

# --------------------------------------------------------------------------------------------------------------------------------

def _resolve_weak_sequence(sequence: IsolatingRunSequence):
    chars = sequence.chars
    length = len(chars)

    # W1
    previous = sequence.sos
    for char in chars:
        if char.type is C.NSM:
            char.type = previous
        else:
            previous = C.ON if char.type in ISOLATE_CONTROLS else char.type

    # W2
    last_strong = sequence.sos
    for char in chars:
        if char.type is C.L or char.type is C.R or char.type is C.AL:
            last_strong = char.type
        elif char.type is C.EN and last_strong is C.AL:
            char.type = C.AN

    # W3
    for char in chars:
        if char.type is C.AL:
            char.type = C.R

    # W4
    for i in range(1, length - 1):
        current = chars[i].type
        if current is C.ES or current is C.CS:
            before = chars[i - 1].type
            after = chars[i + 1].type
            if before is C.EN and after is C.EN:
                chars[i].type = C.EN
            elif current is C.CS and before is C.AN and after is C.AN:
                chars[i].type = C.AN

    # W5
    i = 0
    while i < length:
        if chars[i].type is not C.ET:
            i += 1
            continue
        end = i
        while end < length and chars[end].type is C.ET:
            end += 1
        before = chars[i - 1].type if i > 0 else sequence.sos
        after = chars[end].type if end < length else sequence.eos
        if before is C.EN or after is C.EN:
            for char in chars[i:end]:
                char.type = C.EN
        i = end

    # W6
    for char in chars:
        if char.type is C.ES or char.type is C.ET or char.type is C.CS:
            char.type = C.ON

    # W7
    last_strong = sequence.sos
    for char in chars:
        if char.type is C.L or char.type is C.R:
            last_strong = char.type
        elif char.type is C.EN and last_strong is C.L:
            char.type = C.L


def resolve_weak_types(storage: BidiStorage):
    for sequence in storage.sequences:
        _resolve_weak_sequence(sequence)


def _direction_for_neutrals(category: C) -> C:
    # Numbers count as R when resolving neutrals.
    return C.R if category in NUMBER_TYPES else category


def _resolve_neutral_sequence(sequence: IsolatingRunSequence):
    resolve_bracket_pairs(sequence)

    chars = sequence.chars
    length = len(chars)
    embedding = sequence.embedding_direction
    i = 0
    while i < length:
        if chars[i].type not in NEUTRAL_TYPES:
            i += 1
            continue
        end = i
        while end < length and chars[end].type in NEUTRAL_TYPES:
            end += 1
        leading = _direction_for_neutrals(chars[i - 1].type) if i > 0 else sequence.sos
        trailing = _direction_for_neutrals(chars[end].type) if end < length else sequence.eos
        # N1, falling back to N2
        resolved = leading if leading is trailing else embedding
        for char in chars[i:end]:
            char.type = resolved
        i = end


def resolve_neutral_types(storage: BidiStorage):
    for sequence in storage.sequences:
        _resolve_neutral_sequence(sequence)


def resolve_implicit_levels(storage: BidiStorage):
    """I1 and I2, then give every character removed by X9 the level of the character before it
    so logical to visual mapping stays complete."""
    for sequence in storage.sequences:
        for char in sequence.chars:
            if char.level & 1:
                if char.type is C.L or char.type in NUMBER_TYPES:
                    char.level += 1
            elif char.type is C.R:
                char.level += 1
            elif char.type in NUMBER_TYPES:
                char.level += 2

    previous_level = storage.base_level
    for char in storage.chars:
        if char.removed:
            char.type = char.orig
            char.level = previous_level
        previous_level = char.level


def resolve_paragraph(text: str, direction: ParagraphDirection = ParagraphDirection.AUTO) -> BidiStorage:
    """Run every level resolution stage over one paragraph.

    Args:
        text (str): A single paragraph.
        direction (ParagraphDirection, optional): Requested direction. Defaults to AUTO.

    Returns:
        BidiStorage: Storage holding the resolved level and type of every character (before any line-level reset).
    """
    storage = get_embedding_levels(text, direction)
    if not storage.chars:
        return storage
    explicit_embed_and_overrides(storage)
    build_isolating_run_sequences(storage)
    resolve_weak_types(storage)
    resolve_neutral_types(storage)
    resolve_implicit_levels(storage)
    return storage
