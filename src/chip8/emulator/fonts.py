"""
CHIP-8 Font Glyphs
==================

Each glyph is 4 pixels wide and 5 rows tall. A row is stored in the high
nibble of one byte (bit 7 = leftmost pixel), so the 16 hexadecimal digits
take 16 x 5 = 80 bytes. The table is copied into memory at $050 by
Machine.load_font().
"""

from .constants import FONT_START, GLYPH_HEIGHT

# =============================================================================
# GLYPH BITMAP DATA
# =============================================================================

DEFAULT_FONT = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


def glyph_address(digit: int, font_start: int = FONT_START) -> int:
    """
    Get the memory address of a digit's glyph once the font is loaded.

    Args:
        digit: Hex digit 0-15 (only the low nibble is used)
        font_start: Address the font table was loaded at

    Returns:
        Address of the first row of the glyph
    """
    return font_start + (digit & 0x0F) * GLYPH_HEIGHT
