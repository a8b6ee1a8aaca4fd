import pytest

from bidicaster.arabicData import arabic_tables, joining_type
from bidicaster.arabicShaper import (
    ArabicShaper, DigitShaping, DigitType, LengthMode, LetterShaping, ShapingError, ShapingOptions,
    TashkeelMode, TextDirection, shape,
)
from bidicaster.categories import BidiInputError


def shaper(**options):
    return ArabicShaper(ShapingOptions(**options))


def test_phrase():
    options = ShapingOptions(digits=DigitShaping.EN2AN, length=LengthMode.FIXED_SPACES_NEAR)
    assert shape("مرحبا Hello بالعالم.", options) == (
        "\ufee3\ufeae\ufea3\ufe92\ufe8e Hello \ufe91\ufe8e\ufedf\ufecc\ufe8e\ufedf\ufee2."
    )


def test_joining_types():
    assert joining_type("ب") == "D"
    assert joining_type("ا") == "R"
    assert joining_type("ء") == "U"
    assert joining_type("ـ") == "C"
    assert joining_type("\u200d") == "C"
    assert joining_type("\u064e") == "T"
    assert joining_type("\u200c") == "U"
    assert joining_type("a") == "U"


def test_tables():
    tables = arabic_tables()
    assert tables.letter_forms[0x0628] == {0: 0xFE8F, 1: 0xFE90, 2: 0xFE91, 3: 0xFE92}
    assert tables.lam_alef[0x0627] == {0: 0xFEFB, 1: 0xFEFC}
    assert tables.unshape[0xFEFB] == "لا"
    assert tables.unshape[0xFE77] == "\u064e"


@pytest.mark.parametrize("text, expected", [
    ("ء", "\ufe80"),
    ("ب", "\ufe8f"),
    ("بب", "\ufe91\ufe90"),
    ("ببب", "\ufe91\ufe92\ufe90"),
    ("اب", "\ufe8d\ufe8f"),
    ("با", "\ufe91\ufe8e"),
    # Alef maksura keeps its right joining behavior.
    ("ىب", "\ufeef\ufe8f"),
    ("\u067e", "\ufb56"),
    ("ب\u200d", "\ufe91\u200d"),
    ("ـب", "ـ\ufe90"),
    ("ب\u200cب", "\ufe8f\u200c\ufe8f"),
    ("a ب", "a \ufe8f"),
])
def test_letters(text, expected):
    assert shape(text) == expected


@pytest.mark.parametrize("text, expected", [
    ("لا", "\ufefb"),
    ("بلا", "\ufe91\ufefc"),
    ("لأ", "\ufef7"),
    ("لآ", "\ufef5"),
    ("لإ", "\ufef9"),
    ("لب", "\ufedf\ufe90"),
])
def test_lam_alef(text, expected):
    assert shape(text) == expected


def test_lam_alef_length_modes():
    assert shaper(length=LengthMode.FIXED_SPACES_NEAR).shape("لا") == "\ufefb\ufeff"
    assert shaper(length=LengthMode.FIXED_SPACES_AT_END).shape("لا ب") == "\ufefb \ufe8f "
    assert shaper(length=LengthMode.FIXED_SPACES_AT_BEGINNING).shape("لا") == " \ufefb"


def test_lam_alef_across_harakat():
    assert shape("ل\u064eا") == "\ufefb\ufe76"


@pytest.mark.parametrize("options, expected", [
    ({}, "\ufe91\ufe77\ufe90"),
    ({"letters": LetterShaping.SHAPE_TASHKEEL_ISOLATED}, "\ufe91\ufe76\ufe90"),
    ({"tashkeel": TashkeelMode.REMOVE}, "\ufe91\ufe90"),
    ({"tashkeel": TashkeelMode.REMOVE, "length": LengthMode.FIXED_SPACES_NEAR}, "\ufe91 \ufe90"),
    ({"tashkeel": TashkeelMode.REMOVE, "length": LengthMode.FIXED_SPACES_AT_END}, "\ufe91\ufe90 "),
    ({"tashkeel": TashkeelMode.REMOVE, "length": LengthMode.FIXED_SPACES_AT_BEGINNING}, " \ufe91\ufe90"),
    ({"tashkeel": TashkeelMode.REPLACE_BY_TATWEEL}, "\ufe91ـ\ufe90"),
])
def test_tashkeel(options, expected):
    assert shaper(**options).shape("ب\u064eب") == expected


def test_tashkeel_off_the_stroke():
    assert shape("ب\u064e") == "\ufe8f\ufe76"
    assert shaper(tashkeel=TashkeelMode.REPLACE_BY_TATWEEL).shape("ب\u064e") == "\ufe8f "


@pytest.mark.parametrize("text, expected", [
    ("\ufe91\ufe8e", "با"),
    ("\ufee3\ufeae\ufea3\ufe92\ufe8e", "مرحبا"),
    ("\ufefb", "لا"),
    ("\ufe91\ufe77\ufe90", "ب\u064eب"),
    ("abc", "abc"),
])
def test_unshape(text, expected):
    assert shaper(letters=LetterShaping.UNSHAPE).shape(text) == expected


def test_unshape_fixed_length():
    near = shaper(letters=LetterShaping.UNSHAPE, length=LengthMode.FIXED_SPACES_NEAR)
    assert near.shape("\ufefb\ufeff") == "لا"
    assert near.shape("\ufefb b") == "لاb"
    end = shaper(letters=LetterShaping.UNSHAPE, length=LengthMode.FIXED_SPACES_AT_END)
    assert end.shape("\ufefb ") == "لا"
    beginning = shaper(letters=LetterShaping.UNSHAPE, length=LengthMode.FIXED_SPACES_AT_BEGINNING)
    assert beginning.shape(" \ufefb") == "لا"


@pytest.mark.parametrize("length, text", [
    (LengthMode.FIXED_SPACES_NEAR, "\ufefb"),
    (LengthMode.FIXED_SPACES_NEAR, "\ufefbb"),
    (LengthMode.FIXED_SPACES_AT_END, "\ufefb"),
    (LengthMode.FIXED_SPACES_AT_BEGINNING, "\ufefb "),
])
def test_unshape_without_room(length, text):
    with pytest.raises(ShapingError):
        shaper(letters=LetterShaping.UNSHAPE, length=length).shape(text)


def test_shape_unshape_fixed_near_keeps_length():
    text = "بلا سلام"
    shaped = shaper(length=LengthMode.FIXED_SPACES_NEAR).shape(text)
    assert len(shaped) == len(text)
    unshaped = shaper(letters=LetterShaping.UNSHAPE, length=LengthMode.FIXED_SPACES_NEAR).shape(shaped)
    assert unshaped == text


def test_visual_text():
    assert shaper(text_direction=TextDirection.VISUAL_LTR).shape("اب") == "\ufe8e\ufe91"
    visual_end = shaper(text_direction=TextDirection.VISUAL_LTR, length=LengthMode.FIXED_SPACES_AT_END)
    assert visual_end.shape("ال") == "\ufefb "


@pytest.mark.parametrize("options, text, expected", [
    ({"digits": DigitShaping.EN2AN}, "1234", "\u0661\u0662\u0663\u0664"),
    ({"digits": DigitShaping.EN2AN, "digit_type": DigitType.AN_EXTENDED}, "1234", "\u06f1\u06f2\u06f3\u06f4"),
    ({"digits": DigitShaping.AN2EN}, "\u0661\u0662 \u06f3", "12 \u06f3"),
    ({"digits": DigitShaping.AN2EN, "digit_type": DigitType.AN_EXTENDED}, "\u06f1\u06f2", "12"),
    ({"digits": DigitShaping.ALEN2AN_INIT_LR}, "1 ب 2 a 3", "1 \ufe8f \u0662 a 3"),
    ({"digits": DigitShaping.ALEN2AN_INIT_AL}, "1 a 2", "\u0661 a 2"),
    ({"digits": DigitShaping.ALEN2AN_INIT_AL, "letters": LetterShaping.NOOP}, "1 א 2", "\u0661 א 2"),
])
def test_digits(options, text, expected):
    assert shaper(**options).shape(text) == expected


def test_noop_leaves_letters_alone():
    assert shaper(letters=LetterShaping.NOOP).shape("مرحبا") == "مرحبا"


def test_options_from_mapping():
    options = ShapingOptions.from_mapping({"letters": "UNSHAPE", "digits": "en2an", "length": "Fixed_Spaces_Near"})
    assert options.letters is LetterShaping.UNSHAPE
    assert options.digits is DigitShaping.EN2AN
    assert options.length is LengthMode.FIXED_SPACES_NEAR
    assert options.tashkeel is TashkeelMode.KEEP
    assert options.replace(digits="noop").digits is DigitShaping.NOOP


@pytest.mark.parametrize("mapping", [
    {"letter": "shape"},
    {"letters": "sideways"},
    {"digits": 3},
])
def test_bad_options(mapping):
    with pytest.raises(BidiInputError):
        ShapingOptions.from_mapping(mapping)


def test_non_string_input():
    with pytest.raises(BidiInputError):
        shape(None)
