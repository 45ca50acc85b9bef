"""
CHIP-8 Instruction Word Decoding
================================

Every CHIP-8 instruction is a single big-endian 16-bit word. The word is
split into nibble fields that different instructions interpret in
different ways:

    15  12 11   8 7    4 3    0
    +-----+------+------+------+
    | op  |  x   |  y   |  n   |
    +-----+------+------+------+
          |<------- nnn ------>|
                 |<--- nn ---->|

- **op**: instruction family (high nibble)
- **x**, **y**: register indices
- **n**: 4-bit constant (sprite height, 8XY? sub-operation)
- **nn**: 8-bit immediate
- **nnn**: 12-bit address

The interpreter supports the families 0 (CLS/RET only), 1-9, A and D.
Within the 8 family, sub-operations 0-7 and E are defined.
"""

from dataclasses import dataclass


# Sub-operations of the 8XY? family understood by the interpreter
ALU_OPERATIONS = frozenset({0x0, 0x1, 0x2, 0x3, 0x4, 0x5, 0x6, 0x7, 0xE})

# Families dispatched on the high nibble alone
SIMPLE_FAMILIES = frozenset({0x1, 0x2, 0x3, 0x4, 0x5, 0x6, 0x7, 0x9, 0xA, 0xD})

CLS = 0x00E0
RET = 0x00EE


@dataclass(frozen=True)
class OpcodeFields:
    """
    Operand fields extracted from one instruction word.

    Attributes:
        opcode: The full 16-bit word
        family: High nibble (bits 12-15)
        x: Register index (bits 8-11)
        y: Register index (bits 4-7)
        n: Low nibble (bits 0-3)
        nn: Low byte (bits 0-7)
        nnn: Address (bits 0-11)
    """
    opcode: int
    family: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int


def decode(opcode: int) -> OpcodeFields:
    """Split an instruction word into its operand fields."""
    opcode &= 0xFFFF
    return OpcodeFields(
        opcode=opcode,
        family=(opcode & 0xF000) >> 12,
        x=(opcode & 0x0F00) >> 8,
        y=(opcode & 0x00F0) >> 4,
        n=opcode & 0x000F,
        nn=opcode & 0x00FF,
        nnn=opcode & 0x0FFF,
    )


def is_supported(opcode: int) -> bool:
    """
    Check whether the interpreter can execute an instruction word.

    Args:
        opcode: 16-bit instruction word

    Returns:
        True if Machine.step() has a handler for the word
    """
    fields = decode(opcode)
    if fields.family == 0x0:
        return fields.opcode in (CLS, RET)
    if fields.family == 0x8:
        return fields.n in ALU_OPERATIONS
    return fields.family in SIMPLE_FAMILIES
