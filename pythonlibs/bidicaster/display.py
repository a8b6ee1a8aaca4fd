"""

Submodule tying the bidi engine and the Arabic shaper together into the calls a renderer
actually needs: text in logical order goes in, text in display order comes out.

Text is split into paragraphs after every paragraph separator (CR LF counts as one), and
each paragraph is resolved on its own. Separators stay at the end of their paragraph in
the output, after the paragraph's reordered content.

"""

from __future__ import annotations
import logging

from bidicaster.arabicShaper import ArabicShaper, ShapingOptions
from bidicaster.categories import BidiCategory, BidiInputError, ISOLATE_CONTROLS, ParagraphDirection
from bidicaster.classifier import get_category
from bidicaster.config import add_config_dependencies, get_config
from bidicaster.levels import BidiStorage, resolve_paragraph
from bidicaster.reorder import apply_mirroring, compute_reordering, reset_whitespace_levels

log = logging.getLogger(__name__)

# Implicit marks that strip_controls drops along with isolate controls (LRM, RLM, ALM).
DIRECTIONAL_MARKS = frozenset({"\u200e", "\u200f", "\u061c"})

_defaults_ = {}
add_config_dependencies(_defaults_)


def _get_defaults() -> dict:
    if not _defaults_:
        cfg = get_config()
        _defaults_["direction"] = ParagraphDirection.coerce(cfg.get("default_direction", ParagraphDirection.AUTO))
        _defaults_["mirror"] = bool(cfg.get("mirror", True))
        _defaults_["shaping"] = ShapingOptions.from_mapping(cfg.get("shaping", {}))
    return _defaults_


def _check_text(text) -> str:
    if text is None:
        raise BidiInputError("text is required")
    if not isinstance(text, str):
        raise BidiInputError(f"Expected str, got {type(text).__name__}")
    return text


def _direction(direction) -> ParagraphDirection:
    if direction is None:
        return _get_defaults()["direction"]
    return ParagraphDirection.coerce(direction)


def _line_ends(line_breaks, length: int) -> list:
    """Validate caller supplied line breaks: exclusive end offsets, each within the text."""
    if not line_breaks:
        return [length]
    ends = set()
    for end in line_breaks:
        if isinstance(end, bool) or not isinstance(end, int) or not 0 < end <= length:
            raise BidiInputError(f"Bad line break {end!r} for text of length {length}")
        ends.add(end)
    ends.add(length)
    return sorted(ends)


def split_paragraphs(text: str) -> list:
    """P1: split text after each paragraph separator.

    Returns:
        list[tuple[int,int,int]]: (start, body_end, end) per paragraph, where body_end..end holds the separator.
    """
    paragraphs = []
    start = 0
    i = 0
    length = len(text)
    while i < length:
        if get_category(text[i]) is not BidiCategory.B:
            i += 1
            continue
        end = i + 1
        if text[i] == "\r" and end < length and text[end] == "\n":
            end += 1
        paragraphs.append((start, i, end))
        start = i = end
    if start < length or not paragraphs:
        paragraphs.append((start, length, length))
    return paragraphs


class _Paragraph:
    """One resolved paragraph along with its line level results."""

    def __init__(self, text: str, start: int, body_end: int, end: int, direction: ParagraphDirection, line_ends: list):
        self.start = start
        self.body_length = body_end - start
        self.storage: BidiStorage = resolve_paragraph(text[start:end], direction)
        self.line_ends = [e - start for e in line_ends if start < e < body_end] + [self.body_length]
        self.levels = reset_whitespace_levels(
            self.storage.orig_types, self.storage.levels, self.storage.base_level, self.line_ends + [end - start],
        )

    def visual_order(self) -> list:
        """Paragraph-relative visual order, separators last."""
        order = compute_reordering(self.levels[:self.body_length], self.line_ends)
        order.extend(range(self.body_length, len(self.levels)))
        return order


def _paragraphs(text: str, direction, line_breaks) -> list:
    text = _check_text(text)
    direction = _direction(direction)
    ends = _line_ends(line_breaks, len(text))
    paragraphs = [
        _Paragraph(text, start, body_end, end, direction, ends)
        for start, body_end, end in split_paragraphs(text)
    ]
    log.debug("Resolved %d paragraph(s), %d characters, direction %s", len(paragraphs), len(text), direction.name)
    return paragraphs


def get_base_level(text: str, direction=None) -> int:
    """The resolved embedding level of the first paragraph: 0 for LTR, 1 for RTL."""
    return _paragraphs(text, direction, None)[0].storage.base_level


def get_levels(text: str, direction=None, line_breaks=None) -> list:
    """Final embedding level of every character, after the trailing whitespace reset.
    Characters the algorithm removes (embedding controls, BN) get the level of the character before them.
    """
    levels = []
    for paragraph in _paragraphs(text, direction, line_breaks):
        levels.extend(paragraph.levels)
    return levels


def get_reordering(text: str, direction=None, line_breaks=None) -> list:
    """Logical index shown at each visual position. Removed characters are kept as
    placeholders, so the result is always a permutation of range(len(text)).

    Args:
        text (str): Text in logical order.
        direction (ParagraphDirection | str | int, optional): Paragraph direction. Defaults to the configured default (AUTO).
        line_breaks (list[int], optional): Exclusive end offsets of lines. Defaults to one line per paragraph.

    Returns:
        list[int]: Visual to logical index map.
    """
    order = []
    for paragraph in _paragraphs(text, direction, line_breaks):
        order.extend(paragraph.start + i for i in paragraph.visual_order())
    return order


def resolve(text: str, direction=None, mirror=None, line_breaks=None, strip_controls=False) -> str:
    """Reorder text from logical into display order.

    Args:
        text (str): Text in logical order.
        direction (ParagraphDirection | str | int, optional): Paragraph direction. Defaults to the configured default (AUTO).
        mirror (bool, optional): Swap mirrored glyphs for characters in right-to-left runs. Defaults to the configured default (True).
        line_breaks (list[int], optional): Exclusive end offsets of lines. Defaults to one line per paragraph.
        strip_controls (bool, optional): Also drop isolate controls and implicit directional marks,
            which otherwise pass through. Embedding controls and BN are always dropped. Defaults to False.

    Raises:
        BidiInputError: text isn't a string, or direction or line_breaks are invalid.

    Returns:
        str: Text in visual order.
    """
    if mirror is None:
        mirror = _get_defaults()["mirror"]
    output = []
    for paragraph in _paragraphs(text, direction, line_breaks):
        chars = paragraph.storage.chars
        glyphs = [char.ch for char in chars]
        if mirror:
            glyphs = apply_mirroring(glyphs, paragraph.levels)
        for index in paragraph.visual_order():
            char = chars[index]
            if char.removed:
                continue
            if strip_controls and (char.orig in ISOLATE_CONTROLS or char.ch in DIRECTIONAL_MARKS):
                continue
            output.append(glyphs[index])
    return "".join(output)


def shape(text: str, options: ShapingOptions | None = None, **overrides) -> str:
    """Shape Arabic text. Options not given fall back to the configured shaping options.

    Args:
        text (str): Text to shape.
        options (ShapingOptions, optional): Full set of options to use.
        **overrides: Individual ShapingOptions fields, by enum member or name, e.g. digits="en2an".

    Returns:
        str: Shaped text.
    """
    _check_text(text)
    if options is None:
        options = _get_defaults()["shaping"]
    if overrides:
        options = options.replace(**overrides)
    return ArabicShaper(options).shape(text)


def resolve_and_shape(text: str, direction=None, options: ShapingOptions | None = None) -> str:
    """Shape in logical order, so letters join with their real neighbors, then reorder for display."""
    return resolve(shape(text, options), direction)
