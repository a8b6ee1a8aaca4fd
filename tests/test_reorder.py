import pytest

from bidicaster.categories import BidiCategory as C
from bidicaster.reorder import apply_mirroring, compute_reordering, reorder_line, reset_whitespace_levels


@pytest.mark.parametrize("levels, expected", [
    ([], []),
    ([0, 0, 0], [0, 1, 2]),
    ([1, 1, 1], [2, 1, 0]),
    ([0, 1, 1, 0], [0, 2, 1, 3]),
    ([1, 2, 2, 1], [3, 1, 2, 0]),
    ([0, 2, 2, 0], [0, 1, 2, 3]),
    ([2, 2, 0, 1], [0, 1, 2, 3]),
])
def test_reorder_line(levels, expected):
    assert reorder_line(levels) == expected


def test_whitespace_before_separators_and_at_line_end():
    types = [C.R, C.WS, C.S, C.R, C.WS]
    assert reset_whitespace_levels(types, [1] * 5, 0) == [1, 0, 0, 1, 0]


def test_isolate_controls_count_as_trailing_whitespace():
    types = [C.L, C.WS, C.RLI, C.PDI]
    assert reset_whitespace_levels(types, [2, 2, 2, 2], 1) == [2, 1, 1, 1]


def test_whitespace_reset_per_line():
    types = [C.R, C.WS, C.R, C.WS]
    assert reset_whitespace_levels(types, [1] * 4, 0, [2, 4]) == [1, 0, 1, 0]


def test_reset_leaves_input_alone():
    levels = [1, 1]
    reset_whitespace_levels([C.R, C.WS], levels, 0)
    assert levels == [1, 1]


def test_lines_reorder_independently():
    assert compute_reordering([1, 1, 1, 1], [2, 4]) == [1, 0, 3, 2]
    assert compute_reordering([1, 1, 1, 1]) == [3, 2, 1, 0]


def test_mirroring_only_at_odd_levels():
    assert apply_mirroring(["(", "a", ")"], [1, 0, 0]) == [")", "a", ")"]
    assert apply_mirroring(["<", "x", ">"], [1, 2, 3]) == [">", "x", "<"]
