"""
CHIP-8 Instruction Set Package
==============================

Instruction set definitions shared by the interpreter and the
disassembler. Both decode instruction words through the same functions,
so the disassembler never lists an instruction the interpreter would
reject, or the other way round.

Usage:
    from chip8.cpu import decode, is_supported

    fields = decode(0xD015)
    print(fields.x, fields.y, fields.n)   # 0 1 5
"""

from .opcodes import (
    ALU_OPERATIONS,
    CLS,
    OpcodeFields,
    RET,
    SIMPLE_FAMILIES,
    decode,
    is_supported,
)

__all__ = [
    "ALU_OPERATIONS",
    "CLS",
    "OpcodeFields",
    "RET",
    "SIMPLE_FAMILIES",
    "decode",
    "is_supported",
]
