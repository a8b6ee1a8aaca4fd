from bidicaster.bidi_segmentation import line_to_run_segments


def test_single_ltr_run():
    assert line_to_run_segments("abc") == ([("abc", "L", 0, 0)], 1, [(0, False, False)])


def test_ltr_line_with_rtl_run():
    segments, run_id, run_info = line_to_run_segments("abc אבג")
    assert segments == [("abc ", "L", 0, 0), ("אבג", "R", 1, 4)]
    assert run_id == 2
    assert run_info == [(0, False, False), (1, True, False)]


def test_rtl_line_with_ltr_run():
    segments, run_id, run_info = line_to_run_segments("אבג abc")
    assert segments == [("abc", "L", 2, 0), ("אבג ", "R", 1, 3)]
    assert run_info == [(0, False, True), (1, True, True)]


def test_forced_direction():
    segments, _, run_info = line_to_run_segments("abc", direction="rtl")
    assert segments == [("abc", "L", 2, 0)]
    assert run_info == [(0, False, True)]


def test_run_ids_continue_across_lines():
    run_info = []
    _, run_id, run_info = line_to_run_segments("abc", 0, run_info)
    _, run_id, run_info = line_to_run_segments("אבג abc", run_id, run_info)
    assert run_id == 3
    assert [info[0] for info in run_info] == [0, 1, 2]


def test_removed_characters_have_no_glyph():
    segments, _, _ = line_to_run_segments("a\u202ab\u202cc")
    assert segments == [("a", "L", 0, 0), ("b", "L", 2, 1), ("c", "L", 0, 2)]


def test_empty_line():
    assert line_to_run_segments("") == ([], 0, [])
