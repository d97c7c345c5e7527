"""Glyphs for the 8x8 display font: a blank, the letters A-Z and the digits 0-9."""

from __future__ import annotations

GLYPH_HEIGHT = 8

_BLANK = bytes(8)

FONT: tuple[bytes, ...] = (
    _BLANK,
    bytes((0x78, 0x14, 0x12, 0x11, 0x12, 0x14, 0x78, 0x00)),  # A
    bytes((0x7F, 0x49, 0x49, 0x49, 0x49, 0x49, 0x7F, 0x00)),  # B
    bytes((0x7E, 0x41, 0x41, 0x41, 0x41, 0x41, 0x41, 0x00)),  # C
    bytes((0x7F, 0x41, 0x41, 0x41, 0x41, 0x41, 0x7E, 0x00)),  # D
    bytes((0x7F, 0x49, 0x49, 0x49, 0x49, 0x49, 0x49, 0x00)),  # E
    bytes((0x7F, 0x09, 0x09, 0x09, 0x09, 0x01, 0x01, 0x00)),  # F
    bytes((0x7F, 0x41, 0x41, 0x41, 0x51, 0x51, 0x73, 0x00)),  # G
    bytes((0x7F, 0x08, 0x08, 0x08, 0x08, 0x08, 0x7F, 0x00)),  # H
    bytes((0x00, 0x00, 0x00, 0x7F, 0x00, 0x00, 0x00, 0x00)),  # I
    bytes((0x21, 0x41, 0x41, 0x3F, 0x01, 0x01, 0x01, 0x00)),  # J
    bytes((0x00, 0x7F, 0x08, 0x08, 0x14, 0x22, 0x41, 0x00)),  # K
    bytes((0x7F, 0x40, 0x40, 0x40, 0x40, 0x40, 0x40, 0x00)),  # L
    bytes((0x7F, 0x02, 0x04, 0x08, 0x04, 0x02, 0x7F, 0x00)),  # M
    bytes((0x7F, 0x02, 0x04, 0x08, 0x10, 0x20, 0x7F, 0x00)),  # N
    bytes((0x3E, 0x41, 0x41, 0x41, 0x41, 0x41, 0x3E, 0x00)),  # O
    bytes((0x7F, 0x11, 0x11, 0x11, 0x11, 0x11, 0x0E, 0x00)),  # P
    bytes((0x3E, 0x41, 0x41, 0x49, 0x51, 0x61, 0x7E, 0x00)),  # Q
    bytes((0x7F, 0x11, 0x11, 0x11, 0x31, 0x51, 0x0E, 0x00)),  # R
    bytes((0x46, 0x49, 0x49, 0x49, 0x49, 0x30, 0x00, 0x00)),  # S
    bytes((0x01, 0x01, 0x01, 0x7F, 0x01, 0x01, 0x01, 0x00)),  # T
    bytes((0x3F, 0x40, 0x40, 0x40, 0x40, 0x40, 0x3F, 0x00)),  # U
    bytes((0x0F, 0x10, 0x20, 0x40, 0x20, 0x10, 0x0F, 0x00)),  # V
    bytes((0x7F, 0x20, 0x10, 0x08, 0x10, 0x20, 0x7F, 0x00)),  # W
    bytes((0x00, 0x41, 0x22, 0x14, 0x14, 0x22, 0x41, 0x00)),  # X
    bytes((0x01, 0x02, 0x04, 0x78, 0x04, 0x02, 0x01, 0x00)),  # Y
    bytes((0x41, 0x61, 0x59, 0x45, 0x43, 0x41, 0x00, 0x00)),  # Z
    bytes((0x3E, 0x41, 0x41, 0x49, 0x41, 0x41, 0x3E, 0x00)),  # 0
    bytes((0x00, 0x00, 0x42, 0x7F, 0x40, 0x00, 0x00, 0x00)),  # 1
    bytes((0x30, 0x49, 0x49, 0x49, 0x49, 0x46, 0x00, 0x00)),  # 2
    bytes((0x49, 0x49, 0x49, 0x49, 0x49, 0x49, 0x36, 0x00)),  # 3
    bytes((0x3F, 0x20, 0x20, 0x78, 0x20, 0x20, 0x00, 0x00)),  # 4
    bytes((0x4F, 0x49, 0x49, 0x49, 0x49, 0x30, 0x00, 0x00)),  # 5
    bytes((0x3F, 0x48, 0x48, 0x48, 0x48, 0x48, 0x30, 0x00)),  # 6
    bytes((0x01, 0x01, 0x01, 0x61, 0x31, 0x0D, 0x03, 0x00)),  # 7
    bytes((0x36, 0x49, 0x49, 0x49, 0x49, 0x49, 0x36, 0x00)),  # 8
    bytes((0x06, 0x09, 0x09, 0x09, 0x09, 0x09, 0x7F, 0x00)),  # 9
)

_LETTER_OFFSET = 1
_DIGIT_OFFSET = 27


def _code(character: str | int) -> int:
    """Return the byte value of a one-character string or a byte."""
    if isinstance(character, str):
        if len(character) != 1:
            raise ValueError(f"expected a single character, got {character!r}")
        code = ord(character)
    else:
        code = int(character)
    if not 0 <= code <= 0xFF:
        raise ValueError(f"character code {code} does not fit in a byte")
    return code


def glyph_index(character: str | int) -> int:
    """Index of the glyph for an upper-case letter or digit; 0 (blank) for anything else."""
    code = _code(character)
    if ord("A") <= code <= ord("Z"):
        return code - ord("A") + _LETTER_OFFSET
    if ord("0") <= code <= ord("9"):
        return code - ord("0") + _DIGIT_OFFSET
    return 0


def glyph(character: str | int) -> bytes:
    """The eight column bytes drawn for a character; lower-case ASCII letters are folded up."""
    code = _code(character)
    if ord("a") <= code <= ord("z"):
        code -= ord("a") - ord("A")
    return FONT[glyph_index(code)]