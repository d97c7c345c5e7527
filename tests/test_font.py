import pytest

from galtonsim.font import FONT, GLYPH_HEIGHT, glyph, glyph_index


@pytest.mark.parametrize(
    "character, index",
    [("A", 1), ("Z", 26), ("0", 27), ("9", 36), (" ", 0), ("!", 0)],
)
def test_glyph_index(character, index):
    assert glyph_index(character) == index


def test_glyph_index_does_not_fold_case():
    assert glyph_index("a") == 0


def test_glyph_index_accepts_byte_values():
    assert glyph_index(ord("M")) == glyph_index("M")


def test_letters_and_digits_have_distinct_indices():
    chars = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
    indices = [glyph_index(c) for c in chars]
    assert indices == list(range(1, len(FONT)))


def test_glyph_for_a_matches_font_table():
    assert glyph("A") == bytes((0x78, 0x14, 0x12, 0x11, 0x12, 0x14, 0x78, 0x00))


def test_glyph_folds_lower_case():
    assert glyph("q") == glyph("Q")


def test_unknown_character_is_blank():
    assert glyph("#") == bytes(GLYPH_HEIGHT)


@pytest.mark.parametrize("character", list("ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789 #z"))
def test_every_glyph_is_eight_bytes(character):
    assert len(glyph(character)) == GLYPH_HEIGHT == 8


@pytest.mark.parametrize("bad", ["", "AB", 256, -1])
def test_invalid_characters_are_rejected(bad):
    with pytest.raises(ValueError):
        glyph_index(bad)