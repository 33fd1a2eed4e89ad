import pytest

from bggxml.text import EntityMode, fix_text, repair_double_encoding


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("GlÃ¼ck", "Glück"),
        ("Ã\u0080 la carte", "À la carte"),
        ("Cafâ\u0080\u0094s", "Caf—s"),
        ("Plain ASCII", "Plain ASCII"),
        ("Café", "Café"),
        ("Glück — already fine", "Glück — already fine"),
        ("GlÃ¼ck — mixed", "Glück — mixed"),
    ],
)
def test_repair_double_encoding(raw, expected):
    assert repair_double_encoding(raw) == expected


def test_repair_is_applied_once():
    # "Ã¼" repaired once is "ü"; running the repair again must not change it further
    once = repair_double_encoding("GlÃ¼ck")
    assert repair_double_encoding(once) == once


def test_fix_text_modes():
    assert fix_text("GlÃ¼ck") == "Glück"
    assert fix_text("GlÃ¼ck", EntityMode.VERBATIM) == "GlÃ¼ck"
    assert fix_text(None) is None
