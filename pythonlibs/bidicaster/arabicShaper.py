"""

Submodule for Arabic contextual shaping: picking the isolated, final, initial or medial
presentation form of each letter from its neighbors, lam-alef ligatures, harakat handling,
undoing all of that, and converting between European and Arabic-Indic digits.

Every option is independent of the others and is collected in a ShapingOptions tuple:

    shaper = ArabicShaper(ShapingOptions(digits=DigitShaping.EN2AN))
    shaper.shape("1234")  # "١٢٣٤"

"""

from __future__ import annotations
import logging
from enum import Enum
from typing import NamedTuple

from bidicaster.arabicData import (
    Form, LAM, TATWEEL, arabic_tables, is_tashkeel, joining_type,
)
from bidicaster.categories import BidiCategory, BidiInputError
from bidicaster.classifier import get_category

log = logging.getLogger(__name__)


class ShapingError(Exception):
    """Raised when a fixed length policy leaves no room for a character to expand."""
    pass


class LetterShaping(Enum):
    NOOP = "noop"
    SHAPE = "shape"
    # Like SHAPE, but harakat always take their isolated form.
    SHAPE_TASHKEEL_ISOLATED = "shape_tashkeel_isolated"
    UNSHAPE = "unshape"


class DigitShaping(Enum):
    NOOP = "noop"
    EN2AN = "en2an"
    AN2EN = "an2en"
    # European digits following Arabic letters become Arabic-Indic.
    # The two variants differ in what's assumed before the start of the text.
    ALEN2AN_INIT_LR = "alen2an_init_lr"
    ALEN2AN_INIT_AL = "alen2an_init_al"


class DigitType(Enum):
    # U+0660..U+0669
    AN = 0x0660
    # U+06F0..U+06F9, the Persian and Urdu digits
    AN_EXTENDED = 0x06F0


class TextDirection(Enum):
    LOGICAL = "logical"
    VISUAL_LTR = "visual_ltr"


class LengthMode(Enum):
    """What happens to the cell a lam-alef ligature (or a removed harakah) frees up,
    and where unshaping gets room to expand a ligature back into two letters."""
    GROW_SHRINK = "grow_shrink"
    FIXED_SPACES_NEAR = "fixed_spaces_near"
    FIXED_SPACES_AT_END = "fixed_spaces_at_end"
    FIXED_SPACES_AT_BEGINNING = "fixed_spaces_at_beginning"


class TashkeelMode(Enum):
    KEEP = "keep"
    REMOVE = "remove"
    REPLACE_BY_TATWEEL = "replace_by_tatweel"


class ShapingOptions(NamedTuple):
    letters: LetterShaping = LetterShaping.SHAPE
    digits: DigitShaping = DigitShaping.NOOP
    digit_type: DigitType = DigitType.AN
    text_direction: TextDirection = TextDirection.LOGICAL
    length: LengthMode = LengthMode.GROW_SHRINK
    tashkeel: TashkeelMode = TashkeelMode.KEEP

    @classmethod
    def from_mapping(cls, mapping: dict) -> ShapingOptions:
        """Build options from plain names, as found in the config file, e.g.
        {"letters": "shape", "digits": "EN2AN"}. Member names and values are both accepted, in any case.

        Raises:
            BidiInputError: Unknown field or member name.
        """
        options = {}
        for field, value in mapping.items():
            if field not in cls._fields:
                raise BidiInputError(f"Unknown shaping option {field!r}")
            options[field] = coerce_option(_FIELD_ENUMS[field], value)
        return cls(**options)

    def replace(self, **overrides) -> ShapingOptions:
        return self.from_mapping({**self._asdict(), **overrides})


_FIELD_ENUMS = {
    "letters": LetterShaping,
    "digits": DigitShaping,
    "digit_type": DigitType,
    "text_direction": TextDirection,
    "length": LengthMode,
    "tashkeel": TashkeelMode,
}


def coerce_option(enum_type, value):
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        name = value.strip()
        if name.upper() in enum_type.__members__:
            return enum_type[name.upper()]
        for member in enum_type:
            if member.value == name.lower():
                return member
    raise BidiInputError(f"{value!r} is not a valid {enum_type.__name__}")


# Placeholders for cells freed while shaping. Both are noncharacters, so they can't collide with input.
_LAMALEF_CELL = "\uffff"
_TASHKEEL_CELL = "\ufffe"
_FREED_CELLS = (_LAMALEF_CELL, _TASHKEEL_CELL)
# Zero width no-break space stands in for the alef in place, keeping the length without a visible gap.
_LAMALEF_FILLER = "\ufeff"
# Cells unshaping may consume to make room.
_SPACE_CELLS = (" ", _LAMALEF_FILLER)

# (joins previous, joins next) -> form
_FORM_FOR_JOINS = {
    (False, False): Form.ISOLATED,
    (True, False): Form.FINAL,
    (False, True): Form.INITIAL,
    (True, True): Form.MEDIAL,
}


class ArabicShaper:
    def __init__(self, options: ShapingOptions | None = None):
        self.options = options or ShapingOptions()

    def __repr__(self):
        return f"ArabicShaper({self.options!r})"

    def shape(self, text: str) -> str:
        """Shape a string according to this shaper's options.

        Args:
            text (str): Text in logical order, or in visual left-to-right order for TextDirection.VISUAL_LTR.

        Raises:
            BidiInputError: text isn't a string.
            ShapingError: A fixed length mode has no space to expand a ligature into while unshaping.

        Returns:
            str: The shaped text, in the same order as it was given.
        """
        if not isinstance(text, str):
            raise BidiInputError(f"Expected str, got {type(text).__name__}")
        options = self.options
        visual = options.text_direction is TextDirection.VISUAL_LTR
        length = options.length
        cells = list(text)
        if visual:
            # Shape in logical order, which puts the visual ends the other way around.
            cells.reverse()
            if length is LengthMode.FIXED_SPACES_AT_END:
                length = LengthMode.FIXED_SPACES_AT_BEGINNING
            elif length is LengthMode.FIXED_SPACES_AT_BEGINNING:
                length = LengthMode.FIXED_SPACES_AT_END

        if options.letters in (LetterShaping.SHAPE, LetterShaping.SHAPE_TASHKEEL_ISOLATED):
            cells = self._place_freed_cells(self._shape_letters(cells), length)
        elif options.letters is LetterShaping.UNSHAPE:
            cells = self._unshape_letters(cells, length)
        cells = self._shape_digits(cells)

        if visual:
            cells.reverse()
        return "".join(cells)

    # ----------------------------------------------------------------------------------------------------------------------------

    def _shape_letters(self, chars: list) -> list:
        tables = arabic_tables()
        types = [joining_type(char) for char in chars]
        joiners = [i for i, joining in enumerate(types) if joining != "T"]

        # Lam followed by an alef variant (harakat may sit in between) becomes one ligature in the lam's cell.
        ligatures = {}
        for i, following in zip(joiners, joiners[1:]):
            if ord(chars[i]) == LAM and ord(chars[following]) in tables.lam_alef:
                ligatures[i] = following
        consumed = set(ligatures.values())
        joiners = [i for i in joiners if i not in consumed]

        # A ligature ends in an alef, so it only ever joins on the lam's side.
        effective = {i: "R" if i in ligatures else types[i] for i in joiners}
        shaped = list(chars)
        joins_next = {}
        for k, i in enumerate(joiners):
            joining = effective[i]
            before = effective[joiners[k - 1]] if k > 0 else "U"
            after = effective[joiners[k + 1]] if k + 1 < len(joiners) else "U"
            to_previous = joining in "RDC" and before in "DLC"
            to_next = joining in "DLC" and after in "RDC"
            joins_next[i] = to_next
            if i in ligatures:
                forms = tables.lam_alef[ord(chars[ligatures[i]])]
            else:
                forms = tables.letter_forms.get(ord(chars[i]))
            if not forms:
                continue
            form = forms.get(_FORM_FOR_JOINS[(to_previous, to_next)], forms.get(Form.ISOLATED))
            if form is not None:
                shaped[i] = chr(form)

        for i in consumed:
            shaped[i] = _LAMALEF_CELL

        base = None
        for i, joining in enumerate(types):
            if joining != "T":
                base = i
                continue
            codepoint = ord(chars[i])
            if not is_tashkeel(codepoint):
                continue
            on_stroke = base is not None and joins_next.get(base, False)
            if self.options.tashkeel is TashkeelMode.REMOVE:
                shaped[i] = _TASHKEEL_CELL
            elif self.options.tashkeel is TashkeelMode.REPLACE_BY_TATWEEL:
                shaped[i] = chr(TATWEEL) if on_stroke else " "
            else:
                forms = tables.tashkeel.get(codepoint, {})
                if on_stroke and self.options.letters is LetterShaping.SHAPE:
                    form = forms.get(Form.MEDIAL, forms.get(Form.ISOLATED))
                else:
                    form = forms.get(Form.ISOLATED)
                if form is not None:
                    shaped[i] = chr(form)
        return shaped

    @staticmethod
    def _place_freed_cells(cells: list, length: LengthMode) -> list:
        freed = sum(1 for cell in cells if cell in _FREED_CELLS)
        if not freed:
            return cells
        if length is LengthMode.FIXED_SPACES_NEAR:
            return [(_LAMALEF_FILLER if cell == _LAMALEF_CELL else " ") if cell in _FREED_CELLS else cell for cell in cells]
        kept = [cell for cell in cells if cell not in _FREED_CELLS]
        if length is LengthMode.FIXED_SPACES_AT_END:
            return kept + [" "] * freed
        if length is LengthMode.FIXED_SPACES_AT_BEGINNING:
            return [" "] * freed + kept
        return kept

    @staticmethod
    def _unshape_letters(chars: list, length: LengthMode) -> list:
        unshape = arabic_tables().unshape
        pieces = [unshape.get(ord(char), char) for char in chars]
        growth = sum(len(piece) - 1 for piece in pieces)
        if not growth or length is LengthMode.GROW_SHRINK:
            return list("".join(pieces))

        if length is LengthMode.FIXED_SPACES_NEAR:
            cells = []
            needed = 0
            for i, piece in enumerate(pieces):
                if needed:
                    if piece not in _SPACE_CELLS:
                        raise ShapingError(f"No space after index {i - 1} to expand {chars[i - 1]!r} into")
                    needed -= 1
                    continue
                cells.extend(piece)
                needed = len(piece) - 1
            if needed:
                raise ShapingError(f"No space at the end of the text to expand {chars[-1]!r} into")
            return cells

        cells = list("".join(pieces))
        if length is LengthMode.FIXED_SPACES_AT_END:
            available = len(cells) - len("".join(cells).rstrip("".join(_SPACE_CELLS)))
            if available < growth:
                raise ShapingError(f"Need {growth} trailing spaces to unshape, found {available}")
            return cells[:len(cells) - growth]
        available = len(cells) - len("".join(cells).lstrip("".join(_SPACE_CELLS)))
        if available < growth:
            raise ShapingError(f"Need {growth} leading spaces to unshape, found {available}")
        return cells[growth:]

    def _shape_digits(self, cells: list) -> list:
        mode = self.options.digits
        if mode is DigitShaping.NOOP:
            return cells
        arabic_zero = self.options.digit_type.value

        if mode is DigitShaping.AN2EN:
            return [chr(ord(c) - arabic_zero + 0x30) if arabic_zero <= ord(c) <= arabic_zero + 9 else c for c in cells]
        if mode is DigitShaping.EN2AN:
            return [chr(ord(c) - 0x30 + arabic_zero) if "0" <= c <= "9" else c for c in cells]

        after_arabic = mode is DigitShaping.ALEN2AN_INIT_AL
        shaped = []
        for c in cells:
            if "0" <= c <= "9":
                if after_arabic:
                    c = chr(ord(c) - 0x30 + arabic_zero)
            else:
                category = get_category(c)
                if category is BidiCategory.AL:
                    after_arabic = True
                elif category is BidiCategory.L or category is BidiCategory.R:
                    after_arabic = False
            shaped.append(c)
        return shaped


def shape(text: str, options: ShapingOptions | None = None) -> str:
    return ArabicShaper(options).shape(text)
