"""

Submodule for the line-level half of the bidi algorithm: resetting trailing whitespace (L1),
reversing runs into display order (L2) and mirroring glyphs in right-to-left runs (L4).

Everything here works on plain lists and returns new ones, the resolved paragraph
is never modified.

"""

from __future__ import annotations
from bidicaster.categories import BidiCategory as C, TRAILING_WHITESPACE_TYPES
from bidicaster.classifier import get_mirror


def reset_whitespace_levels(orig_types: list, levels: list, base_level: int, line_ends: list | None = None) -> list:
    """L1: put separators, and any whitespace or isolate controls trailing a separator
    or a line end, back at the paragraph level.

    Args:
        orig_types (list[BidiCategory]): Original categories of the paragraph's characters.
        levels (list[int]): Resolved levels.
        base_level (int): Paragraph embedding level.
        line_ends (list[int], optional): Ascending exclusive end offset of every line, the
            last being the paragraph length. Defaults to a single line.

    Returns:
        list[int]: New list of levels.
    """
    result = list(levels)
    for i, category in enumerate(orig_types):
        if category is C.S or category is C.B:
            result[i] = base_level
            j = i - 1
            while j >= 0 and orig_types[j] in TRAILING_WHITESPACE_TYPES:
                result[j] = base_level
                j -= 1

    start = 0
    for end in line_ends or [len(result)]:
        j = end - 1
        while j >= start and orig_types[j] in TRAILING_WHITESPACE_TYPES:
            result[j] = base_level
            j -= 1
        start = end
    return result


def reorder_line(levels: list) -> list:
    """L2: from the highest level down to the lowest odd one, reverse every run at that level or above.

    Returns:
        list[int]: The logical index displayed at each visual position.
    """
    order = list(range(len(levels)))
    if not levels:
        return order
    highest = max(levels)
    lowest_odd = min(levels) | 1
    length = len(levels)
    for level in range(highest, lowest_odd - 1, -1):
        i = 0
        while i < length:
            if levels[i] < level:
                i += 1
                continue
            end = i + 1
            while end < length and levels[end] >= level:
                end += 1
            order[i:end] = order[i:end][::-1]
            i = end
    return order


def compute_reordering(levels: list, line_ends: list | None = None) -> list:
    """Reorder each line on its own and join the results back up, keeping indexes paragraph-relative."""
    order = []
    start = 0
    for end in line_ends or [len(levels)]:
        order.extend(start + i for i in reorder_line(levels[start:end]))
        start = end
    return order


def apply_mirroring(chars, levels: list) -> list:
    """L4: swap in the mirrored glyph for every mirrorable character sitting at an odd level.

    Args:
        chars (Iterable[str]): Characters in logical order.
        levels (list[int]): Levels after L1.

    Returns:
        list[str]: New list of characters, still in logical order.
    """
    mirrored = []
    for char, level in zip(chars, levels):
        if level & 1:
            replacement = get_mirror(char)
            if replacement is not None:
                char = chr(replacement)
        mirrored.append(char)
    return mirrored
