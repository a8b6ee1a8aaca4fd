"""

Submodule for bidirectional segmentation. Breaks a line into directional runs with the
accompanying metadata a downstream shaping engine (harfbuzz and the like) wants: the run's
text in logical order, its direction, its embedding level and where it starts visually.

"""

from __future__ import annotations
from bidicaster.categories import ParagraphDirection
from bidicaster.levels import resolve_paragraph
from bidicaster.reorder import compute_reordering, reset_whitespace_levels


def line_to_run_segments(line_text, run_id_current=0, run_info=None, direction=ParagraphDirection.AUTO):
    """Break a line of potentially bidirectional text into runs for a shaping engine.

    Args:
        line_text (str): A single line of text to segment.
        run_id_current (int, optional): The current run_id, set across multiple runs of the function. Defaults to 0.
        run_info (list, optional): Continuous list of (run_id, is_rtl_run, is_rtl_line), set across
            multiple runs of the function. Defaults to a new list.
        direction (ParagraphDirection, optional): Paragraph direction for the line. Defaults to AUTO.

    Returns:
        tuple[list[tuple[str,str,int,int]],int,list]: The line's segments in visual order as
            (run text in logical order, "L" or "R", level, visual start offset),
            the new run_id_current, and the extended run_info.
    """
    if run_info is None:
        run_info = []

    # The whole line is resolved as one paragraph: the caller has already split lines.
    storage = resolve_paragraph(line_text, ParagraphDirection.coerce(direction))
    levels = reset_whitespace_levels(storage.orig_types, storage.levels, storage.base_level)
    is_rtl_line = bool(storage.base_level % 2)

    # Walk the visual order, starting a new run whenever the level changes.
    # Removed characters have no glyph, so they never start or break a run.
    runs = []
    last_level = None
    for logical_index in compute_reordering(levels):
        if storage.chars[logical_index].removed:
            continue
        level = levels[logical_index]
        if level != last_level:
            runs.append((level, []))
            last_level = level
        runs[-1][1].append(logical_index)

    segments = []
    visual_start = 0
    for level, indexes in runs:
        run_chars = "".join(storage.chars[i].ch for i in sorted(indexes))
        direction_code = "R" if level % 2 else "L"
        segments.append((run_chars, direction_code, level, visual_start))
        run_info.append((run_id_current, bool(level % 2), is_rtl_line))
        run_id_current += 1
        visual_start += len(indexes)

    return segments, run_id_current, run_info
