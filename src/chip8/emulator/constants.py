"""
CHIP-8 Machine Constants
========================

Memory Map:
    $000-$04F  Unused (historically the interpreter itself)
    $050-$09F  Font glyphs (16 glyphs x 5 bytes)
    $0A0-$1FF  Unused
    $200-$FFF  Program space

Display:
    64 x 32 monochrome pixels, origin at the top-left corner.
"""

MEMORY_SIZE = 0x1000        # 4 KB
PROGRAM_START = 0x200
FONT_START = 0x050
FONT_SIZE = 80              # 16 glyphs x 5 bytes
GLYPH_HEIGHT = 5

MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32

NUM_REGISTERS = 16
FLAG_REGISTER = 0xF         # VF
